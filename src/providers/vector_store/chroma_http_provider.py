"""ChromaDB vector store provider adapter (REST API v2).

Implements :class:`IVectorStoreProvider` by calling a ChromaDB server's
collections endpoint directly with ``httpx``:

    GET    {base}/{name}          -> {"id": ...}       fetch collection
    POST   {base}                 -> {"id": ...}       create collection
    DELETE {base}/{name}                               delete collection
    POST   {base}/{id}/add                             write records
    POST   {base}/{id}/query                           nearest neighbours

where ``{base}`` is ``CHROMA_URL + CHROMA_API_BASE`` (default tenant and
database).  Embeddings are always supplied by the caller; the server-side
embedding function is never used.
"""

from __future__ import annotations

import uuid
from typing import Any
from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError

from src.config.settings import Settings
from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.document import CollectionRef, Embedding, QueryResult
from src.utils.errors import ProvisioningError, StoreQueryError, StoreWriteError

logger = structlog.get_logger(logger_name=__name__)

_MAX_BODY_IN_ERROR = 500
_CREATE_OK = frozenset({httpx.codes.OK, httpx.codes.CREATED})


class ChromaHTTPProvider(IVectorStoreProvider):
    """Vector store provider backed by a remote ChromaDB server.

    Parameters
    ----------
    settings:
        Supplies ``chroma_url`` and ``chroma_api_base``.
    http_client:
        Injected ``httpx.AsyncClient`` shared across the application.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient) -> None:
        self._root_url = settings.chroma_url.rstrip("/")
        self._collections_url = settings.chroma_collections_url
        self._http = http_client

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    async def get_collection(self, name: str) -> CollectionRef:
        url = f"{self._collections_url}/{quote(name, safe='')}"
        try:
            response = await self._http.get(url)
        except httpx.HTTPError as exc:
            raise ProvisioningError(
                message=f"GET {url} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if response.status_code != httpx.codes.OK:
            raise ProvisioningError(
                message=(
                    f"get collection '{name}' returned status {response.status_code}: "
                    f"{_body(response)}"
                ),
                provider_name=self.get_provider_name(),
                status_code=response.status_code,
            )

        return self._parse_collection(response, name)

    async def create_collection(
        self, name: str, metadata: dict[str, Any] | None = None
    ) -> CollectionRef:
        url = self._collections_url
        body: dict[str, Any] = {"name": name}
        if metadata:
            body["metadata"] = metadata

        try:
            response = await self._http.post(url, json=body)
        except httpx.HTTPError as exc:
            raise ProvisioningError(
                message=f"POST {url} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if response.status_code not in _CREATE_OK:
            raise ProvisioningError(
                message=(
                    f"create collection at {url} returned status {response.status_code}: "
                    f"{_body(response)}"
                ),
                provider_name=self.get_provider_name(),
                status_code=response.status_code,
            )

        ref = self._parse_collection(response, name)
        logger.info("collection_created", name=name, collection_id=ref.id)
        return ref

    async def delete_collection(self, name: str) -> bool:
        url = f"{self._collections_url}/{quote(name, safe='')}"
        try:
            response = await self._http.delete(url)
        except httpx.HTTPError as exc:
            raise ProvisioningError(
                message=f"DELETE {url} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            return False
        if response.status_code != httpx.codes.OK:
            raise ProvisioningError(
                message=f"reset error ({response.status_code}): {_body(response)}",
                provider_name=self.get_provider_name(),
                status_code=response.status_code,
            )
        return True

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    async def add(
        self,
        collection_id: str,
        text: str,
        embedding: Embedding,
        metadata: dict[str, Any],
    ) -> str:
        record_id = str(uuid.uuid4())
        url = f"{self._collections_url}/{collection_id}/add"
        body = {
            "documents": [text],
            "metadatas": [metadata],
            "ids": [record_id],
            "embeddings": [embedding],
        }

        try:
            response = await self._http.post(url, json=body)
        except httpx.HTTPError as exc:
            raise StoreWriteError(
                message=f"POST {url} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if response.status_code >= httpx.codes.MULTIPLE_CHOICES:
            raise StoreWriteError(
                message=f"add returned status {response.status_code}: {_body(response)}",
                provider_name=self.get_provider_name(),
                status_code=response.status_code,
            )
        return record_id

    async def query(
        self,
        collection_id: str,
        embedding: Embedding,
        top_k: int,
    ) -> QueryResult:
        url = f"{self._collections_url}/{collection_id}/query"
        body = {"query_embeddings": [embedding], "n_results": top_k}

        try:
            response = await self._http.post(url, json=body)
        except httpx.HTTPError as exc:
            raise StoreQueryError(
                message=f"POST {url} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if response.status_code >= httpx.codes.MULTIPLE_CHOICES:
            raise StoreQueryError(
                message=f"query returned status {response.status_code}: {_body(response)}",
                provider_name=self.get_provider_name(),
                status_code=response.status_code,
            )

        try:
            payload = response.json()
            # Chroma sends null for fields it was not asked to include.
            return QueryResult(
                ids=payload.get("ids") or [],
                documents=payload.get("documents") or [],
                metadatas=payload.get("metadatas") or [],
                distances=payload.get("distances") or [],
            )
        except (ValueError, AttributeError, ValidationError) as exc:
            raise StoreQueryError(
                message=f"failed to decode query response: {exc}",
                provider_name=self.get_provider_name(),
                status_code=response.status_code,
            ) from exc

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def get_provider_name(self) -> str:
        return "chromadb"

    async def is_available(self) -> bool:
        """Return ``True`` if the server answers its v2 heartbeat."""
        try:
            response = await self._http.get(f"{self._root_url}/api/v2/heartbeat", timeout=5.0)
            return response.status_code == httpx.codes.OK
        except httpx.HTTPError:
            return False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _parse_collection(self, response: httpx.Response, name: str) -> CollectionRef:
        """Build a CollectionRef from a collection JSON body."""
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProvisioningError(
                message=f"failed to decode collection response: {exc}",
                provider_name=self.get_provider_name(),
                status_code=response.status_code,
            ) from exc

        if not isinstance(payload, dict) or not payload.get("id"):
            raise ProvisioningError(
                message=f"received empty collection ID for '{name}'",
                provider_name=self.get_provider_name(),
                status_code=response.status_code,
            )

        dimension = payload.get("dimension")
        return CollectionRef(
            id=str(payload["id"]),
            name=str(payload.get("name") or name),
            dimension=dimension if isinstance(dimension, int) else None,
            metadata=payload.get("metadata") or {},
        )


def _body(response: httpx.Response) -> str:
    return response.text[:_MAX_BODY_IN_ERROR]
