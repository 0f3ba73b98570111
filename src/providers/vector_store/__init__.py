"""Vector store provider implementations.

ChromaDB is the sole vector store implementation.  It runs as a separate
server and is reached over its v2 REST API; this process keeps no vector
data of its own.

To swap ChromaDB for another vector database (Qdrant, Weaviate), create a
new class implementing IVectorStoreProvider and register it in main.py.
"""

from src.providers.vector_store.chroma_http_provider import ChromaHTTPProvider

__all__ = ["ChromaHTTPProvider"]
