"""Abstract base class for text-embedding service providers.

Defines the contract for turning a piece of text into an embedding vector.
The shipped implementation wraps Ollama's native ``/api/embeddings``
endpoint; the adapter pattern keeps the ingestion and search services
independent of which backend produces the vectors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.document import Embedding


# Concrete implementation: OllamaEmbeddingProvider (src/providers/embedding/)
class IEmbeddingProvider(ABC):
    """Contract for text-embedding services used by ingestion and search."""

    @abstractmethod
    async def embed(self, text: str, model: str | None = None) -> Embedding:
        """Generate an embedding vector for *text*.

        Parameters
        ----------
        text:
            The literal text to embed (a chunk or a search query).
        model:
            Model identifier to use.  ``None`` selects the provider's
            configured default.

        Returns
        -------
        Embedding
            The embedding vector.  Its width is fixed by the model.

        Raises
        ------
        src.utils.errors.EmbeddingError
            If the call fails or the response cannot be parsed.  A single
            failed call is a single failure; implementations do not retry.
        """

    @abstractmethod
    def get_model(self) -> str:
        """Return the default model identifier used when none is given."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this provider, e.g. ``"ollama"``."""

    @abstractmethod
    async def is_available(self) -> bool:
        """Return ``True`` if the provider is reachable.

        Implementations should check reachability without generating an
        embedding.
        """
