"""Integration tests for the FastAPI surface using TestClient.

The app is built by ``create_app`` with real middleware, routing, auth,
ingestion and PDF extraction; only Ollama and ChromaDB are replaced by the
in-memory fakes from ``tests.conftest``.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from src.api.auth import AuthService
from src.main import create_app
from src.services.collection_provisioner import CollectionProvisioner
from src.services.ingestion.ingestion_service import IngestionService
from src.services.search_service import SearchService
from src.utils.errors import StoreQueryError
from tests.conftest import FakeEmbeddingProvider, FakeVectorStore, make_settings, words


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _create_test_app(**settings_overrides):
    """Create the app with fake upstreams wired onto ``app.state``."""
    settings = make_settings(**settings_overrides)
    app = create_app(settings)

    embedder = FakeEmbeddingProvider()
    store = FakeVectorStore()
    provisioner = CollectionProvisioner(store, embedding_model=settings.embedding_model)

    app.state.settings = settings
    app.state.provisioner = provisioner
    app.state.auth_service = AuthService(settings)
    app.state.ingestion_service = IngestionService(
        settings=settings,
        embedding_provider=embedder,
        vector_store=store,
        provisioner=provisioner,
    )
    app.state.search_service = SearchService(
        settings=settings,
        embedding_provider=embedder,
        vector_store=store,
        provisioner=provisioner,
    )
    return app, store


@pytest.fixture
def api():
    app, store = _create_test_app()
    return TestClient(app), store


def _auth_headers(client: TestClient) -> dict[str, str]:
    response = client.post("/api/login", json={"username": "admin", "password": "secret"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


def _upload(client: TestClient, path: Path, headers: dict[str, str], **form: str):
    with open(path, "rb") as fh:
        return client.post(
            "/api/upload",
            files={"file": (path.name, fh, "application/pdf")},
            data=form,
            headers=headers,
        )


# ---------------------------------------------------------------------------
# Health & login
# ---------------------------------------------------------------------------


class TestHealth:
    def test_health_needs_no_auth(self, api) -> None:
        client, _ = api

        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "service": "VectorDocs", "version": "1.0.0"}

    def test_request_id_generated(self, api) -> None:
        client, _ = api

        response = client.get("/api/health")

        assert response.headers["X-Request-ID"]

    def test_request_id_echoed(self, api) -> None:
        client, _ = api

        response = client.get("/api/health", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"


class TestLogin:
    def test_valid_login_returns_token(self, api) -> None:
        client, _ = api

        response = client.post("/api/login", json={"username": "admin", "password": "secret"})

        assert response.status_code == 200
        assert response.json()["token"]

    def test_wrong_password(self, api) -> None:
        client, _ = api

        response = client.post("/api/login", json={"username": "admin", "password": "nope"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    def test_malformed_body(self, api) -> None:
        client, _ = api

        response = client.post("/api/login", json={"username": "admin"})

        assert response.status_code == 422


class TestAuthGuard:
    @pytest.mark.parametrize(
        ("method", "path"),
        [("post", "/api/upload"), ("get", "/api/search?q=x"), ("get", "/api/reset"), ("post", "/api/reset")],
    )
    def test_missing_header(self, api, method: str, path: str) -> None:
        client, _ = api

        response = getattr(client, method)(path)

        assert response.status_code == 401
        assert response.json()["detail"] == "Authorization header required"

    def test_non_bearer_scheme(self, api) -> None:
        client, _ = api

        response = client.get("/api/search?q=x", headers={"Authorization": "Basic YWRtaW46c2VjcmV0"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Bearer token required"

    def test_invalid_token(self, api) -> None:
        client, _ = api

        response = client.get("/api/search?q=x", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------


class TestUpload:
    def test_upload_pdf(self, api, make_pdf) -> None:
        client, store = api
        path = make_pdf(words(12), name="report.pdf")

        response = _upload(client, path, _auth_headers(client), chunkSize="5", chunkStride="4")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "completed"
        assert body["filename"] == "report.pdf"
        assert (body["chunkSize"], body["chunkStride"]) == (5, 4)
        assert (body["totalChunks"], body["storedChunks"], body["failedChunks"]) == (3, 3, 0)
        assert body["failures"] == []
        assert len(store.all_records()) == 3
        assert store.all_records()[0]["metadata"]["filename"] == "report.pdf"

    def test_invalid_chunk_params_use_defaults(self, api, make_pdf) -> None:
        client, _ = api
        path = make_pdf(words(12))

        response = _upload(client, path, _auth_headers(client), chunkSize="abc", chunkStride="-1")

        assert response.status_code == 200
        assert (response.json()["chunkSize"], response.json()["chunkStride"]) == (100, 80)
        assert response.json()["totalChunks"] == 1

    def test_missing_file(self, api) -> None:
        client, _ = api

        response = client.post("/api/upload", data={"chunkSize": "5"}, headers=_auth_headers(client))

        assert response.status_code == 400

    def test_oversized_upload_rejected(self, tmp_path: Path) -> None:
        app, store = _create_test_app(max_upload_bytes=1024)
        client = TestClient(app)
        path = tmp_path / "big.pdf"
        path.write_bytes(b"%PDF-1.7\n" + b"0" * 4096)

        response = _upload(client, path, _auth_headers(client))

        assert response.status_code == 413
        assert store.all_records() == []

    def test_unreadable_pdf_is_a_structured_error(self, api, tmp_path: Path) -> None:
        client, _ = api
        path = tmp_path / "empty.pdf"
        path.write_bytes(b"")

        response = _upload(client, path, _auth_headers(client))

        assert response.status_code == 500
        assert response.json()["error"] == "ExtractionError"

    def test_temp_file_removed(
        self, api, make_pdf, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        client, _ = api
        spool = tmp_path / "spool"
        spool.mkdir()
        monkeypatch.setattr(tempfile, "tempdir", str(spool))
        path = make_pdf(words(5))

        _upload(client, path, _auth_headers(client))

        assert list(spool.iterdir()) == []


# ---------------------------------------------------------------------------
# Search & reset
# ---------------------------------------------------------------------------


class TestSearch:
    def test_missing_query(self, api) -> None:
        client, _ = api

        response = client.get("/api/search", headers=_auth_headers(client))

        assert response.status_code == 400

    def test_blank_query(self, api) -> None:
        client, _ = api

        response = client.get("/api/search", params={"q": "   "}, headers=_auth_headers(client))

        assert response.status_code == 400

    def test_search_after_upload(self, api, make_pdf) -> None:
        client, _ = api
        headers = _auth_headers(client)
        _upload(client, make_pdf(words(12)), headers, chunkSize="5", chunkStride="4")

        response = client.get("/api/search", params={"q": "w9 w10 w11 w12"}, headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["documents"][0][0] == "w9 w10 w11 w12"
        assert body["metadatas"][0][0]["chunk_num"] == 3
        assert len(body["ids"][0]) == 3

    def test_store_failure_returns_error(self, api) -> None:
        client, _ = api
        service = client.app.state.search_service
        service._vector_store.query = AsyncMock(
            side_effect=StoreQueryError(message="query returned status 500", provider_name="chromadb")
        )

        response = client.get("/api/search", params={"q": "hello"}, headers=_auth_headers(client))

        assert response.status_code == 500
        assert response.json() == {"error": "StoreQueryError", "detail": "query returned status 500"}


class TestReset:
    @pytest.mark.parametrize("method", ["get", "post"])
    def test_reset(self, api, make_pdf, method: str) -> None:
        client, store = api
        headers = _auth_headers(client)
        _upload(client, make_pdf(words(12)), headers)

        response = getattr(client, method)("/api/reset", headers=headers)

        assert response.status_code == 200
        assert response.json() == {"status": "reset successful", "collection": "documents"}
        assert store.collections == {}

    def test_reset_missing_collection(self, api) -> None:
        client, _ = api

        response = client.post("/api/reset", headers=_auth_headers(client))

        assert response.status_code == 200
