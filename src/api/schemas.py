"""Pydantic request/response schemas for the VectorDocs API.

The upload response keeps the camelCase keys the browser frontend
already reads (``chunkSize``, ``storedChunks``, ...); fields are declared
in snake_case with aliases and serialized ``by_alias``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.models.document import IngestionSummary, QueryResult


class LoginRequest(BaseModel):
    """Admin credentials."""

    username: str
    password: str


class LoginResponse(BaseModel):
    token: str


class ChunkFailure(BaseModel):
    """One chunk that did not make it into the store."""

    model_config = ConfigDict(populate_by_name=True)

    chunk_num: int = Field(alias="chunkNum")
    status: str
    error: str | None = None


class UploadResponse(BaseModel):
    """Result of ingesting one uploaded PDF."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = "completed"
    filename: str
    chunk_size: int = Field(alias="chunkSize")
    chunk_stride: int = Field(alias="chunkStride")
    total_chunks: int = Field(alias="totalChunks")
    stored_chunks: int = Field(alias="storedChunks")
    failed_chunks: int = Field(alias="failedChunks")
    failures: list[ChunkFailure] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, summary: IngestionSummary) -> UploadResponse:
        return cls(
            status=summary.status,
            filename=summary.filename,
            chunk_size=summary.chunk_size,
            chunk_stride=summary.chunk_stride,
            total_chunks=summary.total_chunks,
            stored_chunks=summary.stored_chunks,
            failed_chunks=summary.failed_chunks,
            failures=[
                ChunkFailure(chunk_num=o.chunk_num, status=o.status.value, error=o.error)
                for o in summary.failures
            ],
        )


class SearchResponse(BaseModel):
    """Nearest chunks, passed through in the vector store's layout.

    Each field holds one inner list per query embedding; the API always
    sends exactly one query, so clients read index ``[0]``.
    """

    ids: list[list[str]] = Field(default_factory=list)
    documents: list[list[str | None]] = Field(default_factory=list)
    metadatas: list[list[dict[str, Any] | None]] = Field(default_factory=list)
    distances: list[list[float | None]] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: QueryResult) -> SearchResponse:
        return cls(**result.model_dump())


class ResetResponse(BaseModel):
    status: str = "reset successful"
    collection: str


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str = "ok"
    service: str
    version: str


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
