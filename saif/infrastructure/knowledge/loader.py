"""
Loader for the bundled training knowledge dataset.

The dataset ships inside the package (saif/data/training_knowledge.json)
so the service works without any external storage. A different file can
be supplied through settings for experiments or tests.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from ...core.knowledge.service import KnowledgeLoadError

logger = logging.getLogger(__name__)

BUNDLED_DATASET = Path(__file__).resolve().parents[2] / "data" / "training_knowledge.json"


class BundledKnowledgeLoader:
    """
    Reads and decodes the knowledge JSON document.

    Every failure (missing or unreadable file, bad encoding, invalid JSON)
    comes out as KnowledgeLoadError, which the knowledge service turns into fallback
    mode.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        self.path = Path(path) if path else BUNDLED_DATASET

    def __call__(self) -> Any:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except FileNotFoundError:
            raise KnowledgeLoadError(f"Knowledge dataset not found: {self.path}")
        except OSError as e:
            raise KnowledgeLoadError(f"Could not read knowledge dataset {self.path}: {e}")
        except json.JSONDecodeError as e:
            raise KnowledgeLoadError(
                f"Invalid JSON in {self.path} at line {e.lineno}, column {e.colno}: {e.msg}"
            )
        except UnicodeDecodeError as e:
            raise KnowledgeLoadError(f"Knowledge dataset {self.path} is not valid UTF-8: {e}")

        logger.debug("Read knowledge dataset", extra={"path": str(self.path)})
        return document
