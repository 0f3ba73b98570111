"""Provider interfaces (ABCs) that decouple services from concrete backends."""

from src.interfaces.embedding_provider import IEmbeddingProvider
from src.interfaces.vector_store_provider import IVectorStoreProvider

__all__ = ["IEmbeddingProvider", "IVectorStoreProvider"]
