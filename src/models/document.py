"""Document pipeline data models for VectorDocs.

Defines Pydantic v2 models for chunks, resolved collections, per-chunk
ingestion outcomes, ingestion summaries and query results.  All models use
frozen config so a value produced by one stage cannot be mutated by the next.

Pipeline overview:

    1. EXTRACTION: an uploaded PDF is reduced to one plain-text blob.
    2. CHUNKING: the blob is split into overlapping word windows (Chunk).
    3. EMBEDDING: each chunk's text becomes a float vector via Ollama.
    4. STORAGE: text + vector + metadata are written to a ChromaDB
       collection (CollectionRef) as one record per chunk.
    5. RETRIEVAL: a query is embedded and the store returns its nearest
       neighbours (QueryResult).

None of these objects outlive the request that built them; the vector
store is the only system of record.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# An embedding is a plain list of floats; its width is fixed by the model.
Embedding = list[float]


# ---------------------------------------------------------------------------
# Chunk -- one overlapping word window of an uploaded document.
# ---------------------------------------------------------------------------
class Chunk(BaseModel):
    """A contiguous run of whitespace-joined words from one source document."""

    model_config = ConfigDict(frozen=True)

    chunk_num: int = Field(ge=1, description="1-based position of the chunk in its document.")
    text: str = Field(min_length=1, description="Words of the window joined by single spaces.")
    filename: str = Field(description="Original filename of the uploaded document.")

    @property
    def word_count(self) -> int:
        return len(self.text.split(" "))

    def to_metadata(self) -> dict[str, Any]:
        """Return the metadata stored alongside this chunk's record."""
        return {"source": "pdf", "filename": self.filename, "chunk_num": self.chunk_num}


# ---------------------------------------------------------------------------
# CollectionRef -- a resolved vector-store collection.
# ---------------------------------------------------------------------------
class CollectionRef(BaseModel):
    """A collection as reported by the vector store after get-or-create."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Durable collection identifier.")
    name: str = Field(description="Human-readable collection name.")
    dimension: int | None = Field(
        default=None,
        description="Embedding width recorded by the store, if it has seen any vectors.",
    )
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def embedding_model(self) -> str | None:
        model = self.metadata.get("embedding_model")
        return str(model) if model else None


# ---------------------------------------------------------------------------
# Ingestion outcomes
# ---------------------------------------------------------------------------
class ChunkStatus(str, Enum):
    """Terminal state of one chunk inside an ingestion run."""

    STORED = "stored"
    EMBEDDING_FAILED = "embedding_failed"
    STORE_FAILED = "store_failed"


class ChunkOutcome(BaseModel):
    """What happened to one chunk during ingestion."""

    model_config = ConfigDict(frozen=True)

    chunk_num: int = Field(ge=1)
    status: ChunkStatus
    record_id: str | None = Field(default=None, description="Store record id when stored.")
    error: str | None = Field(default=None, description="Failure cause when not stored.")

    @property
    def ok(self) -> bool:
        return self.status == ChunkStatus.STORED


class IngestionSummary(BaseModel):
    """Result of ingesting one uploaded PDF.

    ``status`` is ``"completed"`` even when individual chunks failed; the
    per-chunk ``outcomes`` carry the detail.
    """

    model_config = ConfigDict(frozen=True)

    status: str = "completed"
    filename: str
    chunk_size: int = Field(gt=0)
    chunk_stride: int = Field(gt=0)
    collection_id: str | None = None
    outcomes: list[ChunkOutcome] = Field(default_factory=list)
    ingestion_time: float = Field(default=0.0, ge=0.0)

    @property
    def total_chunks(self) -> int:
        return len(self.outcomes)

    @property
    def stored_chunks(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)

    @property
    def failed_chunks(self) -> int:
        return self.total_chunks - self.stored_chunks

    @property
    def failures(self) -> list[ChunkOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]


# ---------------------------------------------------------------------------
# QueryResult -- nearest-neighbour results straight from the store.
# ---------------------------------------------------------------------------
class QueryResult(BaseModel):
    """Parallel result arrays, one outer element per query embedding.

    Ordering within each inner list is the store's own (ascending distance).
    """

    model_config = ConfigDict(frozen=True)

    ids: list[list[str]] = Field(default_factory=list)
    documents: list[list[str | None]] = Field(default_factory=list)
    metadatas: list[list[dict[str, Any] | None]] = Field(default_factory=list)
    distances: list[list[float | None]] = Field(default_factory=list)

    @property
    def hit_count(self) -> int:
        return len(self.ids[0]) if self.ids else 0
