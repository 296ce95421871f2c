"""Tests for embedding providers, validation, factory and cost estimates."""

from __future__ import annotations

import json
import math
from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest

from docsearch.config import EmbeddingSettings
from docsearch.embeddings import factory
from docsearch.embeddings.cost import count_tokens, estimate_embedding_cost
from docsearch.embeddings.ollama_provider import OllamaEmbeddingProvider
from docsearch.embeddings.openai_provider import OpenAIEmbeddingProvider
from docsearch.embeddings.validation import (
    InvalidEmbeddingError,
    is_valid_embedding,
    validate_embedding,
)

# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidation:
    def test_valid(self):
        assert validate_embedding([0.1, -0.2, 3]) == [0.1, -0.2, 3]

    def test_tuple_accepted(self):
        assert validate_embedding((0.5, 0.5)) == [0.5, 0.5]

    @pytest.mark.parametrize(
        "vector",
        ["[0.1, 0.2]", None, [], [0.1, math.nan], [0.1, "0.2"], [True, 0.2]],
    )
    def test_invalid(self, vector):
        with pytest.raises(InvalidEmbeddingError):
            validate_embedding(vector)
        assert is_valid_embedding(vector) is False

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_embedding([])


# ---------------------------------------------------------------------------
# OpenAI
# ---------------------------------------------------------------------------


def _openai_response(vectors: list[list[float]], tokens: int, reverse: bool = False):
    data = [SimpleNamespace(index=i, embedding=v) for i, v in enumerate(vectors)]
    if reverse:
        data.reverse()
    return SimpleNamespace(data=data, usage=SimpleNamespace(total_tokens=tokens))


class TestOpenAIProvider:
    def test_embed(self):
        client = MagicMock()
        client.embeddings.create.return_value = _openai_response([[0.1, 0.2]], 7)
        provider = OpenAIEmbeddingProvider(client=client)

        result = provider.embed("hello")

        assert result.vector == [0.1, 0.2]
        assert result.token_count == 7
        client.embeddings.create.assert_called_once_with(
            model="text-embedding-3-small", input=["hello"], dimensions=1536
        )

    def test_custom_dimensions_forwarded(self):
        client = MagicMock()
        client.embeddings.create.return_value = _openai_response([[0.1], [0.2]], 4)
        provider = OpenAIEmbeddingProvider(dimensions=512, client=client)

        provider.embed_many(["a", "b"])

        assert provider.dimension == 512
        assert client.embeddings.create.call_args.kwargs["dimensions"] == 512

    def test_ada_sends_no_dimensions(self):
        client = MagicMock()
        client.embeddings.create.return_value = _openai_response([[0.1]], 1)
        OpenAIEmbeddingProvider(model="text-embedding-ada-002", client=client).embed("x")

        assert "dimensions" not in client.embeddings.create.call_args.kwargs

    def test_embed_many_orders_by_index(self):
        client = MagicMock()
        client.embeddings.create.return_value = _openai_response(
            [[1.0], [2.0], [3.0]], 12, reverse=True
        )
        provider = OpenAIEmbeddingProvider(client=client)

        result = provider.embed_many(["a", "b", "c"])

        assert result.vectors == [[1.0], [2.0], [3.0]]
        assert result.total_tokens == 12

    def test_embed_many_empty(self):
        client = MagicMock()
        provider = OpenAIEmbeddingProvider(client=client)
        assert provider.embed_many([]).vectors == []
        client.embeddings.create.assert_not_called()

    def test_embed_query_returns_vector(self):
        client = MagicMock()
        client.embeddings.create.return_value = _openai_response([[0.3]], 1)
        assert OpenAIEmbeddingProvider(client=client).embed_query("q") == [0.3]

    def test_dimension_from_model(self):
        assert OpenAIEmbeddingProvider(
            model="text-embedding-3-large", client=MagicMock()
        ).dimension == 3072

    def test_missing_usage_counts_zero(self):
        client = MagicMock()
        client.embeddings.create.return_value = SimpleNamespace(
            data=[SimpleNamespace(index=0, embedding=[0.1])], usage=None
        )
        assert OpenAIEmbeddingProvider(client=client).embed("x").token_count == 0

    def test_provider_errors_propagate(self):
        client = MagicMock()
        client.embeddings.create.side_effect = RuntimeError("rate limited")
        with pytest.raises(RuntimeError, match="rate limited"):
            OpenAIEmbeddingProvider(client=client).embed("x")


# ---------------------------------------------------------------------------
# Ollama
# ---------------------------------------------------------------------------


class TestOllamaProvider:
    def test_embed_many(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200, json={"embeddings": [[0.1, 0.2], [0.3, 0.4]], "prompt_eval_count": 5}
            )

        provider = OllamaEmbeddingProvider(transport=httpx.MockTransport(handler))
        result = provider.embed_many(["a", "b"])

        assert seen["path"] == "/api/embed"
        assert seen["body"] == {"model": "nomic-embed-text", "input": ["a", "b"]}
        assert result.vectors == [[0.1, 0.2], [0.3, 0.4]]
        assert result.total_tokens == 5

    def test_http_error_propagates(self):
        provider = OllamaEmbeddingProvider(
            transport=httpx.MockTransport(lambda r: httpx.Response(500, text="boom"))
        )
        with pytest.raises(httpx.HTTPStatusError):
            provider.embed("x")


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


class TestFactory:
    def setup_method(self):
        factory.clear_cache()

    def test_available(self):
        assert factory.available_providers() == ["openai", "ollama"]

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Available"):
            factory.get_embedding_provider("cohere")

    def test_singleton_without_kwargs(self):
        a = factory.get_embedding_provider("ollama")
        b = factory.get_embedding_provider("OLLAMA")
        assert a is b

    def test_from_settings_ollama(self):
        provider = factory.provider_from_settings(
            EmbeddingSettings(provider="ollama", model="mxbai-embed-large", dimension=1024)
        )
        assert isinstance(provider, OllamaEmbeddingProvider)
        assert provider.model == "mxbai-embed-large"
        assert provider.dimension == 1024

    def test_from_settings_openai(self, monkeypatch):
        created = {}

        class FakeOpenAI:
            def __init__(self, **kwargs):
                created.update(kwargs)

        monkeypatch.setattr("openai.OpenAI", FakeOpenAI)
        provider = factory.provider_from_settings(
            EmbeddingSettings(api_key="sk-test", max_retries=4)
        )
        assert isinstance(provider, OpenAIEmbeddingProvider)
        assert created == {"api_key": "sk-test", "max_retries": 4}


# ---------------------------------------------------------------------------
# Cost
# ---------------------------------------------------------------------------


class TestCost:
    def test_count_tokens(self):
        assert count_tokens("hello world") == 2

    def test_estimate(self):
        estimate = estimate_embedding_cost(["hello world", "hello"], price_per_token=0.5)
        assert estimate.estimated_tokens == 3
        assert estimate.estimated_cost == pytest.approx(1.5)

    def test_empty(self):
        estimate = estimate_embedding_cost([])
        assert estimate.estimated_tokens == 0
        assert estimate.estimated_cost == 0
