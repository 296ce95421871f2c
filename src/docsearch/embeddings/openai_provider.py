"""OpenAI embedding provider — text-embedding-3-small/large.

Requires an API key via ``OPENAI_API_KEY`` (or the ``api_key`` argument).
Transient failures are retried by the SDK itself (``max_retries``).
"""

from __future__ import annotations

import logging
from typing import Any

from docsearch.embeddings.base import BatchEmbeddingResult, EmbeddingProvider, EmbeddingResult

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "text-embedding-3-small"
DEFAULT_MAX_RETRIES = 2

_DIMENSION_MAP = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}

BATCH_SIZE = 2048  # OpenAI max inputs per request


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Embed text via the OpenAI Embeddings API."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        dimensions: int | None = None,
        client: Any = None,
    ):
        self.model = model
        self._dimensions = dimensions or _DIMENSION_MAP.get(model, 1536)

        if client is None:
            try:
                import openai
            except ImportError as exc:
                raise ImportError(
                    "openai package required: pip install docsearch-rag"
                ) from exc
            client = openai.OpenAI(api_key=api_key, max_retries=max_retries)
        self._client = client

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def embed(self, text: str) -> EmbeddingResult:
        resp = self._client.embeddings.create(input=[text], **self._create_kwargs())
        return EmbeddingResult(
            vector=resp.data[0].embedding,
            token_count=self._usage_tokens(resp),
        )

    def embed_many(self, texts: list[str]) -> BatchEmbeddingResult:
        if not texts:
            return BatchEmbeddingResult()

        result = BatchEmbeddingResult()
        for i in range(0, len(texts), BATCH_SIZE):
            batch = texts[i : i + BATCH_SIZE]
            resp = self._client.embeddings.create(input=batch, **self._create_kwargs())
            # Sort by index to guarantee order
            ordered = sorted(resp.data, key=lambda d: d.index)
            result.vectors.extend(d.embedding for d in ordered)
            result.total_tokens += self._usage_tokens(resp)

        return result

    @property
    def dimension(self) -> int:
        return self._dimensions

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _create_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"model": self.model}
        # Only the text-embedding-3 family accepts a dimensions override
        if self.model.startswith("text-embedding-3"):
            kwargs["dimensions"] = self._dimensions
        return kwargs

    @staticmethod
    def _usage_tokens(resp: Any) -> int:
        usage = getattr(resp, "usage", None)
        return getattr(usage, "total_tokens", 0) or 0
