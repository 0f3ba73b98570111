"""Embedding provider implementations.

Embeddings convert text into numeric vectors that capture semantic meaning.
These vectors are stored in ChromaDB and used for similarity search.

    OllamaEmbeddingProvider -- any Ollama embedding model via /api/embeddings
    (default ``embeddinggemma:300m``).  Free and local, requires a running
    Ollama server.
"""

from src.providers.embedding.ollama_embedding_provider import OllamaEmbeddingProvider

__all__ = ["OllamaEmbeddingProvider"]
