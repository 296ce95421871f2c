"""Ollama embedding provider — local-first, no API keys needed.

Uses the Ollama REST API (http://localhost:11434) with models like
``nomic-embed-text``. Handy for building an index offline.
"""

from __future__ import annotations

import logging

import httpx

from docsearch.embeddings.base import BatchEmbeddingResult, EmbeddingProvider, EmbeddingResult

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "nomic-embed-text"
DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_DIM = 768


class OllamaEmbeddingProvider(EmbeddingProvider):
    """Embed text via a local Ollama server."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        dimension: int = DEFAULT_DIM,
        max_retries: int = 2,
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._dimension = dimension
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport or httpx.HTTPTransport(retries=max_retries),
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def embed(self, text: str) -> EmbeddingResult:
        batch = self.embed_many([text])
        return EmbeddingResult(vector=batch.vectors[0], token_count=batch.total_tokens)

    def embed_many(self, texts: list[str]) -> BatchEmbeddingResult:
        if not texts:
            return BatchEmbeddingResult()

        resp = self._client.post(
            "/api/embed",
            json={"model": self.model, "input": texts},
        )
        resp.raise_for_status()
        data = resp.json()
        return BatchEmbeddingResult(
            vectors=data["embeddings"],
            total_tokens=data.get("prompt_eval_count", 0),
        )

    @property
    def dimension(self) -> int:
        return self._dimension
