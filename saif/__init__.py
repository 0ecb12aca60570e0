"""
Saif - training knowledge and workout analytics service.

This package contains the complete application:
- core: Framework-agnostic knowledge base, text sanitizer and analytics
- infrastructure: Dataset loading and workout backend implementations
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
