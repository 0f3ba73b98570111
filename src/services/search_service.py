"""Semantic search over ingested documents.

Embeds the query once, resolves the collection once and runs a single
nearest-neighbour query.  Unlike ingestion nothing is swallowed here: an
embedding, provisioning or store failure propagates to the caller, since a
failed search has no useful partial result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from src.models.document import QueryResult
from src.services.collection_provisioner import CollectionProvisioner

if TYPE_CHECKING:
    from src.config.settings import Settings
    from src.interfaces.embedding_provider import IEmbeddingProvider
    from src.interfaces.vector_store_provider import IVectorStoreProvider

logger = structlog.get_logger(logger_name=__name__)


class SearchService:
    """Answers free-text queries with the nearest stored chunks."""

    def __init__(
        self,
        settings: Settings,
        embedding_provider: IEmbeddingProvider,
        vector_store: IVectorStoreProvider,
        provisioner: CollectionProvisioner,
    ) -> None:
        self._collection_name = settings.collection_name
        self._model = settings.embedding_model
        self._top_k = settings.search_top_k
        self._embedding_provider = embedding_provider
        self._vector_store = vector_store
        self._provisioner = provisioner

    async def search(self, query_text: str, top_k: int | None = None) -> QueryResult:
        """Return up to *top_k* (default 5) chunks nearest to *query_text*.

        Raises
        ------
        ValueError
            If *query_text* is blank.
        EmbeddingError, ProvisioningError, StoreQueryError
            Propagated unchanged from the collaborators.
        """
        if not query_text or not query_text.strip():
            raise ValueError("query text must not be empty")

        limit = top_k or self._top_k
        embedding = await self._embedding_provider.embed(query_text, model=self._model)
        collection = await self._provisioner.resolve(self._collection_name)
        CollectionProvisioner.check_dimension(collection, embedding)

        result = await self._vector_store.query(collection.id, embedding, limit)
        logger.info("search_complete", top_k=limit, hits=result.hit_count)
        return result
