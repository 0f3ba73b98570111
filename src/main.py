"""VectorDocs FastAPI application entry point.

Wires together providers, services, and routes via dependency injection.
Loads configuration from ``.env``, the environment and the optional
``config/config.yaml``, configures structured logging, and serves the
single-page frontend when its build directory exists.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from src.api.auth import AuthService
from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import SERVICE_NAME, SERVICE_VERSION
from src.api.routes import router as api_router
from src.config.loader import load_settings
from src.config.settings import Settings
from src.providers.embedding.ollama_embedding_provider import OllamaEmbeddingProvider
from src.providers.vector_store.chroma_http_provider import ChromaHTTPProvider
from src.services.collection_provisioner import CollectionProvisioner
from src.services.ingestion.ingestion_service import IngestionService
from src.services.ingestion.pdf_extractor import PDFExtractor
from src.services.search_service import SearchService
from src.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = load_settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Full DI assembly for the FastAPI application
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    # -- Shared resources --
    http_client = httpx.AsyncClient(timeout=app_settings.get_http_timeout())

    # -- Providers --
    embedding_provider = OllamaEmbeddingProvider(settings=app_settings, http_client=http_client)
    vector_store = ChromaHTTPProvider(settings=app_settings, http_client=http_client)

    # -- Services --
    provisioner = CollectionProvisioner(
        vector_store=vector_store,
        embedding_model=app_settings.embedding_model,
    )
    ingestion_service = IngestionService(
        settings=app_settings,
        embedding_provider=embedding_provider,
        vector_store=vector_store,
        provisioner=provisioner,
        extractor=PDFExtractor(),
    )
    search_service = SearchService(
        settings=app_settings,
        embedding_provider=embedding_provider,
        vector_store=vector_store,
        provisioner=provisioner,
    )

    return {
        "settings": app_settings,
        "http_client": http_client,
        "embedding_provider": embedding_provider,
        "vector_store": vector_store,
        "provisioner": provisioner,
        "ingestion_service": ingestion_service,
        "search_service": search_service,
        "auth_service": AuthService(app_settings),
    }


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    app_settings: Settings = application.state.settings
    components = _build_all(app_settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    if app_settings.app_env == "production" and app_settings.uses_default_secrets():
        _logger.warning(
            "default_secrets_in_use",
            message="JWT_SECRET or ADMIN_PASSWORD is still set to its default value",
        )

    _logger.info(
        "app_startup",
        version=SERVICE_VERSION,
        environment=app_settings.app_env,
        ollama_url=app_settings.ollama_url,
        chroma_url=app_settings.chroma_url,
        embedding_model=app_settings.embedding_model,
        collection=app_settings.collection_name,
    )

    yield

    # -- Shutdown: close shared httpx client --
    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build and configure the FastAPI application."""
    app_settings = app_settings or settings
    application = FastAPI(
        title=f"{SERVICE_NAME} API",
        version=SERVICE_VERSION,
        description=(
            "Upload PDF documents, split them into overlapping word windows, "
            "embed each window with Ollama and store it in ChromaDB for "
            "semantic search."
        ),
        lifespan=_lifespan,
    )
    application.state.settings = app_settings

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    # -- API routes --
    application.include_router(api_router)

    # -- Frontend static files (mounted last so /api wins) --
    frontend_dir = Path(app_settings.frontend_dir)
    if frontend_dir.is_dir():
        application.mount(
            "/",
            StaticFiles(directory=str(frontend_dir), html=True),
            name="frontend",
        )
    else:
        _logger.info("frontend_not_found", frontend_dir=str(frontend_dir))

    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.port,
        reload=(settings.app_env == "development"),
    )
