"""VectorDocs domain models -- re-exports all public model classes.

Import from ``src.models`` rather than the individual module so callers do
not depend on the file layout.
"""

from __future__ import annotations

from src.models.document import (
    Chunk,
    ChunkOutcome,
    ChunkStatus,
    CollectionRef,
    Embedding,
    IngestionSummary,
    QueryResult,
)

__all__ = [
    "Chunk",
    "ChunkOutcome",
    "ChunkStatus",
    "CollectionRef",
    "Embedding",
    "IngestionSummary",
    "QueryResult",
]
