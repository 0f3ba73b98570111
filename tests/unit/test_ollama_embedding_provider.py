"""Unit tests for OllamaEmbeddingProvider against a mocked HTTP transport."""

from __future__ import annotations

import json

import httpx
import pytest

from src.providers.embedding.ollama_embedding_provider import OllamaEmbeddingProvider
from src.utils.errors import EmbeddingError
from tests.conftest import make_settings, mock_http_client


def _provider(handler) -> OllamaEmbeddingProvider:
    return OllamaEmbeddingProvider(settings=make_settings(), http_client=mock_http_client(handler))


class TestEmbed:
    @pytest.mark.asyncio
    async def test_posts_model_and_prompt(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"embedding": [0.1, 0.2, 3]})

        provider = _provider(handler)
        embedding = await provider.embed("hello world")

        assert embedding == [0.1, 0.2, 3.0]
        assert str(seen[0].url) == "http://ollama.test:11434/api/embeddings"
        assert json.loads(seen[0].content) == {"model": "test-embed", "prompt": "hello world"}

    @pytest.mark.asyncio
    async def test_explicit_model_overrides_default(self) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"embedding": [1.0]})

        await _provider(handler).embed("x", model="other-model")

        assert bodies[0]["model"] == "other-model"

    @pytest.mark.asyncio
    async def test_non_200_status(self) -> None:
        provider = _provider(lambda request: httpx.Response(500, text="model not loaded"))

        with pytest.raises(EmbeddingError) as exc_info:
            await provider.embed("x")

        assert exc_info.value.status_code == 500
        assert "model not loaded" in exc_info.value.message
        assert exc_info.value.provider_name == "ollama"

    @pytest.mark.asyncio
    async def test_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(EmbeddingError):
            await _provider(handler).embed("x")

    @pytest.mark.asyncio
    async def test_undecodable_body(self) -> None:
        provider = _provider(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(EmbeddingError):
            await provider.embed("x")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"embedding": []},
            {"embedding": None},
            {"embedding": ["a", "b"]},
            {"embedding": [True, False]},
            [0.1, 0.2],
        ],
    )
    async def test_malformed_payload(self, payload) -> None:
        provider = _provider(lambda request: httpx.Response(200, json=payload))

        with pytest.raises(EmbeddingError):
            await provider.embed("x")


class TestMetadata:
    def test_model_and_name(self) -> None:
        provider = _provider(lambda request: httpx.Response(200))

        assert provider.get_model() == "test-embed"
        assert provider.get_provider_name() == "ollama"

    @pytest.mark.asyncio
    async def test_is_available(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/tags"
            return httpx.Response(200, json={"models": []})

        assert await _provider(handler).is_available() is True

    @pytest.mark.asyncio
    async def test_is_unavailable_on_connect_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("down", request=request)

        assert await _provider(handler).is_available() is False
