"""Custom exception hierarchy for VectorDocs.

All application exceptions inherit from :class:`VectorDocsError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "ollama", "chromadb", "pymupdf") caused the failure,
and an optional upstream ``status_code`` for HTTP-backed providers.

The hierarchy is organized by pipeline stage:

    VectorDocsError  (base -- catch-all for any VectorDocs error)
    +-- ExtractionError        (PDF could not be opened or parsed)
    +-- EmbeddingError         (embedding provider call failed)
    +-- ProvisioningError      (collection lookup / create / delete failed)
    |   +-- DimensionMismatchError (collection built with another model)
    +-- StoreWriteError        (vector-store add failed)
    +-- StoreQueryError        (vector-store query failed)
    +-- AuthenticationError    (login or bearer-token rejected)
    +-- ConfigurationError     (startup / invalid config)

Ingestion treats EmbeddingError and StoreWriteError as per-chunk failures;
every other error is fatal to the request that raised it.
"""


class VectorDocsError(Exception):
    """Base exception for all VectorDocs errors.

    Every subclass carries a human-readable ``message``, an optional
    ``provider_name`` identifying the external service involved, and an
    optional ``status_code`` reported by that service.  ``__str__``
    prefixes the provider name in brackets for log output, e.g.
    ``[ollama] embedding request returned status 500: ...``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        self._status_code = status_code
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    @property
    def status_code(self) -> int | None:
        return self._status_code

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Document extraction
# ---------------------------------------------------------------------------

class ExtractionError(VectorDocsError):
    """Raised when a PDF cannot be opened or its text cannot be extracted."""

    def __init__(
        self,
        message: str = "PDF text extraction failed",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, status_code=status_code)


# ---------------------------------------------------------------------------
# Embedding provider
# ---------------------------------------------------------------------------

class EmbeddingError(VectorDocsError):
    """Raised when the embedding provider call fails or returns an unusable body."""

    def __init__(
        self,
        message: str = "Embedding request failed",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, status_code=status_code)


# ---------------------------------------------------------------------------
# Vector store
# ---------------------------------------------------------------------------

class ProvisioningError(VectorDocsError):
    """Raised when a collection cannot be fetched, created or deleted."""

    def __init__(
        self,
        message: str = "Collection provisioning failed",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, status_code=status_code)


class DimensionMismatchError(ProvisioningError):
    """Raised when a collection holds embeddings from a different model or width.

    Mixing embedding models in one collection makes nearest-neighbour
    results meaningless; the collection must be reset first.
    """

    def __init__(
        self,
        message: str = "Collection embedding dimension does not match the configured model",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, status_code=status_code)


class StoreWriteError(VectorDocsError):
    """Raised when adding a record to the vector store fails."""

    def __init__(
        self,
        message: str = "Vector store write failed",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, status_code=status_code)


class StoreQueryError(VectorDocsError):
    """Raised when a nearest-neighbour query against the vector store fails."""

    def __init__(
        self,
        message: str = "Vector store query failed",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, status_code=status_code)


# ---------------------------------------------------------------------------
# Auth / configuration
# ---------------------------------------------------------------------------

class AuthenticationError(VectorDocsError):
    """Raised when credentials or a bearer token are rejected."""

    def __init__(
        self,
        message: str = "Authentication failed",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, status_code=status_code)


class ConfigurationError(VectorDocsError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, status_code=status_code)
