"""Ollama embedding provider adapter.

Implements :class:`IEmbeddingProvider` against Ollama's native
``POST /api/embeddings`` endpoint, which takes ``{"model", "prompt"}`` and
answers ``{"embedding": [float, ...]}``.  Runs locally with no API key.

Setup: install Ollama (https://ollama.ai), ``ollama pull embeddinggemma:300m``
and set OLLAMA_URL=http://localhost:11434.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from src.config.settings import Settings
from src.interfaces.embedding_provider import IEmbeddingProvider
from src.models.document import Embedding
from src.utils.errors import EmbeddingError

logger = structlog.get_logger(logger_name=__name__)

# Longest slice of an upstream error body copied into exception messages.
_MAX_BODY_IN_ERROR = 500


class OllamaEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider backed by a local Ollama server.

    Parameters
    ----------
    settings:
        Supplies ``ollama_url`` and the default ``embedding_model``.
    http_client:
        Injected ``httpx.AsyncClient`` shared with the rest of the app for
        connection pooling and testability.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient) -> None:
        self._base_url = settings.ollama_url.rstrip("/")
        self._model = settings.embedding_model
        self._http = http_client

    # ------------------------------------------------------------------
    # IEmbeddingProvider implementation
    # ------------------------------------------------------------------

    async def embed(self, text: str, model: str | None = None) -> Embedding:
        """Embed *text* with *model* (or the configured default)."""
        model_name = model or self._model
        url = f"{self._base_url}/api/embeddings"

        try:
            response = await self._http.post(url, json={"model": model_name, "prompt": text})
        except httpx.HTTPError as exc:
            raise EmbeddingError(
                message=f"embedding request to {url} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if response.status_code != httpx.codes.OK:
            raise EmbeddingError(
                message=(
                    f"embedding request returned status {response.status_code}: "
                    f"{response.text[:_MAX_BODY_IN_ERROR]}"
                ),
                provider_name=self.get_provider_name(),
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise EmbeddingError(
                message=f"failed to decode embedding response: {exc}",
                provider_name=self.get_provider_name(),
                status_code=response.status_code,
            ) from exc

        embedding = _parse_embedding(payload)
        if embedding is None:
            raise EmbeddingError(
                message="embedding response did not contain a non-empty numeric 'embedding' list",
                provider_name=self.get_provider_name(),
                status_code=response.status_code,
            )

        logger.debug("ollama_embedding", model=model_name, dimension=len(embedding))
        return embedding

    def get_model(self) -> str:
        return self._model

    def get_provider_name(self) -> str:
        return "ollama"

    async def is_available(self) -> bool:
        """Return ``True`` if the Ollama server answers ``/api/tags``."""
        try:
            response = await self._http.get(f"{self._base_url}/api/tags", timeout=5.0)
            return response.status_code == httpx.codes.OK
        except httpx.HTTPError:
            return False


def _parse_embedding(payload: Any) -> Embedding | None:
    """Return the ``embedding`` list as floats, or ``None`` if malformed."""
    if not isinstance(payload, dict):
        return None
    raw = payload.get("embedding")
    if not isinstance(raw, list) or not raw:
        return None
    # bool is an int subclass; reject it explicitly.
    if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in raw):
        return None
    return [float(v) for v in raw]
