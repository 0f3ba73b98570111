"""Shared pytest fixtures for the VectorDocs test suite."""

from __future__ import annotations

import hashlib
import math
import struct
import uuid
from pathlib import Path
from typing import Any, Callable

import fitz
import httpx
import pytest

from src.config.settings import Settings
from src.interfaces.embedding_provider import IEmbeddingProvider
from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.document import CollectionRef, QueryResult
from src.utils.errors import EmbeddingError, ProvisioningError, StoreWriteError

_EMBEDDING_DIM = 16


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def make_settings(**overrides: Any) -> Settings:
    """Build a Settings instance with predictable test values."""
    defaults: dict[str, Any] = {
        "ollama_url": "http://ollama.test:11434",
        "chroma_url": "http://chroma.test:8000",
        "embedding_model": "test-embed",
        "collection_name": "documents",
        "admin_username": "admin",
        "admin_password": "secret",
        "jwt_secret": "test-secret-with-enough-length-for-hs256",
        "frontend_dir": "/nonexistent/frontend/dist",
        "app_env": "development",
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


# ---------------------------------------------------------------------------
# In-memory fakes
# ---------------------------------------------------------------------------


def _hash_to_vector(text: str, dim: int = _EMBEDDING_DIM) -> list[float]:
    """Generate a deterministic unit vector by hashing *text*."""
    raw = hashlib.sha256(text.encode("utf-8")).digest()
    while len(raw) < dim * 2:
        raw += hashlib.sha256(raw).digest()
    values = [v - 32768 for v in struct.unpack(f"<{dim}H", raw[: dim * 2])]
    magnitude = max(math.sqrt(sum(v * v for v in values)), 1e-10)
    return [v / magnitude for v in values]


class FakeEmbeddingProvider(IEmbeddingProvider):
    """Deterministic embedding provider.

    ``fail_on_calls`` holds 1-based call numbers that raise
    :class:`EmbeddingError` instead of returning a vector.
    """

    def __init__(self, dim: int = _EMBEDDING_DIM, fail_on_calls: set[int] | None = None) -> None:
        self.dim = dim
        self.fail_on_calls = fail_on_calls or set()
        self.calls: list[tuple[str, str | None]] = []

    async def embed(self, text: str, model: str | None = None) -> list[float]:
        self.calls.append((text, model))
        if len(self.calls) in self.fail_on_calls:
            raise EmbeddingError(
                message=f"embedding request returned status 500: call {len(self.calls)}",
                provider_name="fake",
                status_code=500,
            )
        return _hash_to_vector(text, self.dim)

    def get_model(self) -> str:
        return "test-embed"

    def get_provider_name(self) -> str:
        return "fake"

    async def is_available(self) -> bool:
        return True


class FakeVectorStore(IVectorStoreProvider):
    """In-memory vector store keyed by collection name.

    ``fail_adds`` holds 1-based ``add`` call numbers that raise
    :class:`StoreWriteError`.
    """

    def __init__(self, fail_adds: set[int] | None = None) -> None:
        self.collections: dict[str, CollectionRef] = {}
        self.records: dict[str, list[dict[str, Any]]] = {}
        self.fail_adds = fail_adds or set()
        self.add_calls = 0
        self.create_calls = 0
        self.get_calls = 0

    async def get_collection(self, name: str) -> CollectionRef:
        self.get_calls += 1
        if name not in self.collections:
            raise ProvisioningError(
                message=f"get collection '{name}' returned status 404: not found",
                provider_name="fake",
                status_code=404,
            )
        return self.collections[name]

    async def create_collection(
        self, name: str, metadata: dict[str, Any] | None = None
    ) -> CollectionRef:
        self.create_calls += 1
        if name in self.collections:
            raise ProvisioningError(message="collection already exists", status_code=409)
        ref = CollectionRef(id=str(uuid.uuid4()), name=name, metadata=metadata or {})
        self.collections[name] = ref
        self.records[ref.id] = []
        return ref

    async def delete_collection(self, name: str) -> bool:
        ref = self.collections.pop(name, None)
        if ref is None:
            return False
        self.records.pop(ref.id, None)
        return True

    async def add(
        self,
        collection_id: str,
        text: str,
        embedding: list[float],
        metadata: dict[str, Any],
    ) -> str:
        self.add_calls += 1
        if self.add_calls in self.fail_adds or collection_id not in self.records:
            raise StoreWriteError(
                message=f"add returned status 500: call {self.add_calls}",
                provider_name="fake",
                status_code=500,
            )
        record_id = str(uuid.uuid4())
        self.records[collection_id].append(
            {"id": record_id, "document": text, "embedding": embedding, "metadata": metadata}
        )
        return record_id

    async def query(
        self, collection_id: str, embedding: list[float], top_k: int
    ) -> QueryResult:
        rows = self.records.get(collection_id, [])
        scored = sorted(
            ((math.dist(row["embedding"], embedding), row) for row in rows),
            key=lambda pair: pair[0],
        )[:top_k]
        return QueryResult(
            ids=[[row["id"] for _, row in scored]],
            documents=[[row["document"] for _, row in scored]],
            metadatas=[[row["metadata"] for _, row in scored]],
            distances=[[dist for dist, _ in scored]],
        )

    def get_provider_name(self) -> str:
        return "fake"

    async def is_available(self) -> bool:
        return True

    def all_records(self) -> list[dict[str, Any]]:
        return [row for rows in self.records.values() for row in rows]


@pytest.fixture
def fake_embedder() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def fake_store() -> FakeVectorStore:
    return FakeVectorStore()


# ---------------------------------------------------------------------------
# HTTP and PDF helpers
# ---------------------------------------------------------------------------


def mock_http_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """Return an AsyncClient whose requests are answered by *handler*."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def words(count: int, prefix: str = "w") -> str:
    """Return ``"w1 w2 ... wN"``."""
    return " ".join(f"{prefix}{i}" for i in range(1, count + 1))


@pytest.fixture
def make_pdf(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a real PDF with one page per text argument."""

    def _make(*pages: str, name: str = "doc.pdf", **save_kwargs: Any) -> Path:
        path = tmp_path / name
        doc = fitz.open()
        for text in pages:
            page = doc.new_page()
            if text:
                page.insert_textbox(fitz.Rect(50, 50, 550, 800), text, fontsize=10)
        doc.save(str(path), **save_kwargs)
        doc.close()
        return path

    return _make
