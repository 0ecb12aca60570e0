from .loader import BUNDLED_DATASET, BundledKnowledgeLoader

__all__ = ["BUNDLED_DATASET", "BundledKnowledgeLoader"]
