"""Get-or-create provisioning of vector-store collections.

Makes ingestion and search idempotent against a stateful store: a name is
resolved to its durable collection id, creating the collection on first
use.  Nothing is cached in-process, so every :meth:`resolve` costs one
round trip (fetch) or two (fetch, then create).  Callers resolve once per
request and pass the resulting :class:`CollectionRef` down explicitly.

New collections are tagged with the embedding model that will fill them.
A collection tagged with a different model, or reporting a vector width
that differs from a fresh embedding, is rejected with
:class:`DimensionMismatchError` instead of silently mixing vector spaces.
"""

from __future__ import annotations

import structlog

from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.document import CollectionRef, Embedding
from src.utils.errors import DimensionMismatchError, ProvisioningError

logger = structlog.get_logger(logger_name=__name__)


class CollectionProvisioner:
    """Resolves collection names to ids and resets collections.

    Parameters
    ----------
    vector_store:
        Store whose collections are managed.
    embedding_model:
        Model recorded on newly created collections and checked on
        existing ones.  ``None`` disables the model tag entirely.
    """

    def __init__(
        self,
        vector_store: IVectorStoreProvider,
        embedding_model: str | None = None,
    ) -> None:
        self._vector_store = vector_store
        self._embedding_model = embedding_model

    async def resolve(self, name: str) -> CollectionRef:
        """Return the collection named *name*, creating it if needed.

        Raises
        ------
        ProvisioningError
            If the fetch fails and creation fails too, creation succeeds
            without yielding an identifier, or the fetch answers 200 with a
            body that is not a usable collection.
        DimensionMismatchError
            If the existing collection was built with another model.
        """
        try:
            ref = await self._vector_store.get_collection(name)
        except ProvisioningError as exc:
            # A 200 with an unusable body means the collection exists;
            # creating it again would only fail with a conflict.
            if exc.status_code == 200:
                raise
            # Transport errors and non-200 statuses (404, 5xx) fall through
            # to creation; only a failed create is fatal.
            logger.info(
                "collection_fetch_failed",
                name=name,
                status=exc.status_code,
                error=exc.message,
            )
        else:
            self._check_model(ref)
            return ref

        metadata = {"embedding_model": self._embedding_model} if self._embedding_model else None
        return await self._vector_store.create_collection(name, metadata=metadata)

    async def reset(self, name: str) -> bool:
        """Delete the collection named *name*.

        A missing collection counts as success.  Returns ``True`` if a
        collection was actually deleted.
        """
        deleted = await self._vector_store.delete_collection(name)
        logger.info("collection_reset", name=name, existed=deleted)
        return deleted

    @staticmethod
    def check_dimension(ref: CollectionRef, embedding: Embedding) -> None:
        """Raise if *embedding* cannot live in the collection *ref*."""
        if ref.dimension is not None and ref.dimension != len(embedding):
            raise DimensionMismatchError(
                message=(
                    f"collection '{ref.name}' holds {ref.dimension}-dimensional embeddings "
                    f"but the configured model produced {len(embedding)}; "
                    "reset the collection before switching models"
                ),
            )

    def _check_model(self, ref: CollectionRef) -> None:
        recorded = ref.embedding_model
        if self._embedding_model and recorded and recorded != self._embedding_model:
            raise DimensionMismatchError(
                message=(
                    f"collection '{ref.name}' was built with embedding model '{recorded}' "
                    f"but '{self._embedding_model}' is configured; "
                    "reset the collection before switching models"
                ),
            )
