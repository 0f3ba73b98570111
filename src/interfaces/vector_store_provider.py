"""Abstract base class for vector-store service providers.

Defines the contract for managing collections and for writing and querying
embedded chunks inside one collection.  The shipped implementation talks to
a ChromaDB server over its v2 REST API; the adapter pattern keeps the
services independent of the chosen backend.

Collection-level calls are addressed by *name*; record-level calls are
addressed by the durable collection *id* that a name resolves to.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from src.models.document import CollectionRef, Embedding, QueryResult


# Concrete implementation: ChromaHTTPProvider (src/providers/vector_store/)
class IVectorStoreProvider(ABC):
    """Contract for vector-store services used by the pipelines.

    All methods are async so network-backed stores never block the event
    loop.  None of them retry.
    """

    @abstractmethod
    async def get_collection(self, name: str) -> CollectionRef:
        """Fetch an existing collection by name.

        Raises
        ------
        src.utils.errors.ProvisioningError
            On transport failure or any non-success status, including
            "not found".  ``status_code`` is set when the store answered.
        """

    @abstractmethod
    async def create_collection(
        self, name: str, metadata: dict[str, Any] | None = None
    ) -> CollectionRef:
        """Create a collection named *name* and return it.

        Raises
        ------
        src.utils.errors.ProvisioningError
            On transport failure, a non-success status (upstream status and
            body included), or a success response without an identifier.
        """

    @abstractmethod
    async def delete_collection(self, name: str) -> bool:
        """Delete the collection named *name*.

        Returns
        -------
        bool
            ``True`` if a collection was deleted, ``False`` if none existed.

        Raises
        ------
        src.utils.errors.ProvisioningError
            On transport failure or any status other than success/not-found.
        """

    @abstractmethod
    async def add(
        self,
        collection_id: str,
        text: str,
        embedding: Embedding,
        metadata: dict[str, Any],
    ) -> str:
        """Write one record to the collection and return its generated id.

        Every call generates a fresh random id, so writing the same text
        twice produces two records.

        Raises
        ------
        src.utils.errors.StoreWriteError
            On transport failure or any status >= 300.
        """

    @abstractmethod
    async def query(
        self,
        collection_id: str,
        embedding: Embedding,
        top_k: int,
    ) -> QueryResult:
        """Return up to *top_k* nearest neighbours of *embedding*.

        Raises
        ------
        src.utils.errors.StoreQueryError
            On transport failure, status >= 300 or an unparseable body.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this provider, e.g. ``"chromadb"``."""

    @abstractmethod
    async def is_available(self) -> bool:
        """Return ``True`` if the store answers its heartbeat."""
