"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# This class uses pydantic-settings to read configuration from (in
# priority order):
#
#   1. **Environment variables** -- e.g., CHROMA_URL=http://chroma:8000
#   2. **.env file** -- key=value lines in the project root .env file
#
# The mapping is automatic: field name `chroma_url` maps to env var
# `CHROMA_URL`.  Default values are used when neither source sets a field.
# config/loader.py adds a third, lowest-priority layer from YAML.
#
# One Settings instance is built at startup and passed into every
# provider and service constructor; nothing below the API layer reads
# the environment directly.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CHROMA_API_BASE = "/api/v2/tenants/default_tenant/databases/default_database/collections"


class Settings(BaseSettings):
    """VectorDocs application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Embedding provider (Ollama) ===
    ollama_url: str = "http://localhost:11434"
    embedding_model: str = "embeddinggemma:300m"

    # === Vector store (ChromaDB REST API) ===
    chroma_url: str = "http://localhost:8000"
    chroma_api_base: str = DEFAULT_CHROMA_API_BASE
    collection_name: str = "documents"

    # === Ingestion / search ===
    default_chunk_size: int = Field(default=100, gt=0)
    default_chunk_stride: int = Field(default=80, gt=0)
    search_top_k: int = Field(default=5, gt=0)
    max_upload_bytes: int = Field(default=32 * 1024 * 1024, gt=0)
    # Seconds; 0 disables the timeout entirely.
    http_timeout: float = Field(default=120.0, ge=0.0)

    # === Auth ===
    admin_username: str = "admin"
    admin_password: str = "secret"
    jwt_secret: str = "change_me_in_prod"
    jwt_expiry_hours: int = Field(default=24, gt=0)

    # === App Config ===
    frontend_dir: str = "frontend/dist"
    app_host: str = "0.0.0.0"
    port: int = 8080
    app_env: str = "development"
    log_level: str = "INFO"

    @property
    def chroma_collections_url(self) -> str:
        """Absolute URL of the collections endpoint (no trailing slash)."""
        return f"{self.chroma_url.rstrip('/')}{self.chroma_api_base.rstrip('/')}"

    def get_http_timeout(self) -> float | None:
        """Return the httpx timeout value, ``None`` meaning wait forever."""
        return self.http_timeout or None

    def uses_default_secrets(self) -> bool:
        """Return ``True`` if the JWT secret or admin password were left at defaults."""
        return self.jwt_secret == "change_me_in_prod" or self.admin_password == "secret"
