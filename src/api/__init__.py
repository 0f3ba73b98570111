"""VectorDocs API layer: routes, schemas, auth, and middleware."""

from src.api.auth import AuthService, require_auth
from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import router
from src.api.schemas import (
    ErrorResponse,
    HealthResponse,
    LoginRequest,
    LoginResponse,
    ResetResponse,
    SearchResponse,
    UploadResponse,
)

__all__ = [
    "AuthService",
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "require_auth",
    "router",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "ResetResponse",
    "SearchResponse",
    "UploadResponse",
]
