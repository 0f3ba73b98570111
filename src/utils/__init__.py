"""Utility modules for VectorDocs.

- **errors** -- Domain-specific exception hierarchy rooted at VectorDocsError;
  each pipeline stage raises its own subclass so callers can tell fatal
  failures from per-chunk ones without broad ``except Exception`` blocks.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

from src.utils.errors import (
    AuthenticationError,
    ConfigurationError,
    DimensionMismatchError,
    EmbeddingError,
    ExtractionError,
    ProvisioningError,
    StoreQueryError,
    StoreWriteError,
    VectorDocsError,
)
from src.utils.logging import configure_logging, get_logger

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "DimensionMismatchError",
    "EmbeddingError",
    "ExtractionError",
    "ProvisioningError",
    "StoreQueryError",
    "StoreWriteError",
    "VectorDocsError",
    "configure_logging",
    "get_logger",
]
