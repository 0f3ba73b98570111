"""FastAPI API routes for VectorDocs.

Service dependencies are resolved from ``app.state`` via FastAPI's
``Depends`` using the ``Annotated`` pattern.

Endpoint                Method     Auth  Description
-----------------------------------------------------------------------
/api/login              POST       no    Exchange admin credentials for a token
/api/upload             POST       yes   Upload a PDF -> extract -> chunk -> embed -> store
/api/search?q=          GET        yes   Top-k semantic search over stored chunks
/api/reset              GET/POST   yes   Delete the document collection
/api/health             GET        no    Liveness probe
"""

from __future__ import annotations

import os
import tempfile
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile

from src.api.auth import AuthDep, AuthServiceDep
from src.api.schemas import (
    ErrorResponse,
    HealthResponse,
    LoginRequest,
    LoginResponse,
    ResetResponse,
    SearchResponse,
    UploadResponse,
)
from src.config.settings import Settings
from src.services.collection_provisioner import CollectionProvisioner
from src.services.ingestion.ingestion_service import IngestionService
from src.services.search_service import SearchService
from src.utils.errors import AuthenticationError
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

SERVICE_NAME = "VectorDocs"
SERVICE_VERSION = "1.0.0"

router = APIRouter(prefix="/api")

# Uploads are copied to a temp file in 64 KB reads; the size cap is checked
# on every read and the copy stops at the first read past it.
_UPLOAD_CHUNK_SIZE = 64 * 1024


# ---------------------------------------------------------------------------
# Dependency injection helpers -- resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _get_ingestion_service(request: Request) -> IngestionService:
    """Return the ingestion service from application state."""
    return request.app.state.ingestion_service


def _get_search_service(request: Request) -> SearchService:
    """Return the search service from application state."""
    return request.app.state.search_service


def _get_provisioner(request: Request) -> CollectionProvisioner:
    """Return the collection provisioner from application state."""
    return request.app.state.provisioner


SettingsDep = Annotated[Settings, Depends(_get_settings)]
IngestionDep = Annotated[IngestionService, Depends(_get_ingestion_service)]
SearchDep = Annotated[SearchService, Depends(_get_search_service)]
ProvisionerDep = Annotated[CollectionProvisioner, Depends(_get_provisioner)]


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Exchange admin credentials for a bearer token",
)
async def login(body: LoginRequest, auth_service: AuthServiceDep) -> LoginResponse:
    try:
        token = auth_service.login(body.username, body.password)
    except AuthenticationError as exc:
        raise HTTPException(status_code=401, detail=exc.message) from exc
    return LoginResponse(token=token)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


async def _spool_upload(file: UploadFile, max_bytes: int) -> str:
    """Copy *file* into a temporary ``.pdf`` and return its path.

    Raises ``HTTPException(413)`` once more than *max_bytes* have been read;
    the partial temp file is removed before raising.
    """
    fd, path = tempfile.mkstemp(prefix="vectordocs-", suffix=".pdf")
    total = 0
    try:
        with os.fdopen(fd, "wb") as out:
            while True:
                chunk = await file.read(_UPLOAD_CHUNK_SIZE)
                if not chunk:
                    break
                total += len(chunk)
                if total > max_bytes:
                    raise HTTPException(
                        status_code=413,
                        detail=(
                            f"File too large: >{max_bytes // (1024 * 1024)} MB. "
                            f"Maximum: {max_bytes} bytes."
                        ),
                    )
                out.write(chunk)
    except BaseException:
        os.unlink(path)
        raise
    return path


@router.post(
    "/upload",
    response_model=UploadResponse,
    response_model_by_alias=True,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}},
    summary="Upload a PDF for chunking, embedding and storage",
)
async def upload_document(
    _claims: AuthDep,
    settings: SettingsDep,
    ingestion: IngestionDep,
    file: Annotated[UploadFile | None, File()] = None,
    chunk_size: Annotated[str | None, Form(alias="chunkSize")] = None,
    chunk_stride: Annotated[str | None, Form(alias="chunkStride")] = None,
) -> UploadResponse:
    """Ingest one PDF.  Invalid chunk parameters fall back to the defaults."""
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    path = await _spool_upload(file, settings.max_upload_bytes)
    try:
        _logger.info("upload_received", filename=file.filename, bytes=os.path.getsize(path))
        summary = await ingestion.ingest(path, file.filename, chunk_size, chunk_stride)
    finally:
        os.unlink(path)

    return UploadResponse.from_summary(summary)


@router.get(
    "/search",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Semantic search over ingested documents",
)
async def search_documents(
    _claims: AuthDep,
    search: SearchDep,
    q: Annotated[str | None, Query()] = None,
) -> SearchResponse:
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Query parameter 'q' is required")

    result = await search.search(q)
    return SearchResponse.from_result(result)


@router.api_route(
    "/reset",
    methods=["GET", "POST"],
    response_model=ResetResponse,
    summary="Delete the document collection",
)
async def reset_collection(
    _claims: AuthDep,
    settings: SettingsDep,
    provisioner: ProvisionerDep,
) -> ResetResponse:
    """Drop every stored chunk.  The collection is recreated on next use."""
    await provisioner.reset(settings.collection_name)
    return ResetResponse(collection=settings.collection_name)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health", response_model=HealthResponse, summary="Liveness probe")
async def health_check() -> HealthResponse:
    return HealthResponse(service=SERVICE_NAME, version=SERVICE_VERSION)
