"""Shared fixtures for tests — synthetic pages, fake providers, no network calls."""

from __future__ import annotations

import hashlib
import textwrap
from pathlib import Path

import numpy as np
import pytest

from docsearch.embeddings.base import BatchEmbeddingResult, EmbeddingProvider, EmbeddingResult
from docsearch.vectorstore.base import HybridSearchUnavailable, VectorStore
from docsearch.vectorstore.schemas import MetadataFilter, SearchResult, VectorRecord

DIM = 32

# ---------------------------------------------------------------------------
# Fake providers
# ---------------------------------------------------------------------------


class FakeEmbedder(EmbeddingProvider):
    """Deterministic hash-based embeddings; one token per word."""

    def __init__(self, dim: int = DIM):
        self.model = "fake-embed"
        self._dim = dim
        self.calls: list[list[str]] = []

    def embed(self, text: str) -> EmbeddingResult:
        batch = self.embed_many([text])
        return EmbeddingResult(vector=batch.vectors[0], token_count=batch.total_tokens)

    def embed_many(self, texts: list[str]) -> BatchEmbeddingResult:
        self.calls.append(list(texts))
        return BatchEmbeddingResult(
            vectors=[self._hash_embed(t) for t in texts],
            total_tokens=sum(len(t.split()) for t in texts),
        )

    @property
    def dimension(self) -> int:
        return self._dim

    def _hash_embed(self, text: str) -> list[float]:
        h = hashlib.sha256(text.encode()).digest()
        vec = np.array([h[i % len(h)] / 255.0 + 0.01 for i in range(self._dim)], dtype=np.float32)
        vec /= np.linalg.norm(vec)
        return vec.tolist()


class ScriptedStore(VectorStore):
    """Vector store whose answers are scripted per threshold.

    ``by_threshold`` maps a threshold to the results ``match`` returns for
    it; unscripted thresholds return nothing. Every call is recorded.
    """

    def __init__(
        self,
        by_threshold: dict[float, list[SearchResult]] | None = None,
        text_results: list[SearchResult] | None = None,
        hybrid_results: list[SearchResult] | None = None,
        text_error: Exception | None = None,
        hybrid_error: Exception | None = None,
    ):
        self.by_threshold = by_threshold or {}
        self.text_results = text_results or []
        self.hybrid_results = hybrid_results
        self.text_error = text_error
        self.hybrid_error = hybrid_error
        self.match_calls: list[tuple[float, int]] = []
        self.text_calls: list[tuple[str, int]] = []
        self.hybrid_calls: list[tuple[float, int]] = []
        self.records: list[VectorRecord] = []

    def add(self, records: list[VectorRecord]) -> int:
        self.records.extend(records)
        return len(records)

    def match(
        self,
        query_embedding: list[float],
        threshold: float,
        limit: int = 10,
        metadata_filter: MetadataFilter | None = None,
    ) -> list[SearchResult]:
        self.match_calls.append((threshold, limit))
        return list(self.by_threshold.get(threshold, []))[:limit]

    def hybrid_match(self, query_embedding, threshold, limit=10):
        self.hybrid_calls.append((threshold, limit))
        if self.hybrid_error is not None:
            raise self.hybrid_error
        if self.hybrid_results is None:
            raise HybridSearchUnavailable("not scripted")
        return list(self.hybrid_results)

    def text_search(self, query: str, limit: int = 10) -> list[SearchResult]:
        self.text_calls.append((query, limit))
        if self.text_error is not None:
            raise self.text_error
        return list(self.text_results)[:limit]

    def count_by_title(self, title: str) -> int:
        return sum(1 for r in self.records if r.metadata.get("title") == title)

    def count(self) -> int:
        return len(self.records)

    def clear(self) -> None:
        self.records.clear()


def make_result(
    title: str = "Agent Card",
    similarity: float = 0.8,
    content: str = "passage",
    **metadata,
) -> SearchResult:
    return SearchResult(
        content=content,
        metadata={"title": title, "url": "https://docs.example/docs/agent-card", **metadata},
        similarity=similarity,
    )


def make_results(n: int, title: str = "Agent Card", similarity: float = 0.8) -> list[SearchResult]:
    return [make_result(title=title, similarity=similarity - i * 0.01, content=f"p{i}") for i in range(n)]


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


# ---------------------------------------------------------------------------
# Synthetic pages
# ---------------------------------------------------------------------------


@pytest.fixture
def agent_card_page() -> str:
    return textwrap.dedent("""\
        # Agent Card
        URL: /docs/specification/agent-card
        ***
        title: Agent Card
        icon: id-card
        ---

        ## Overview

        An agent card is a JSON document that describes an agent. It lists the
        skills the agent offers and the endpoint where it can be reached.

        ### Required Fields

        Every card must include a name, a url and a version string.

        ### Example Card

        ```json
        {"name": "weather-agent", "url": "https://agents.example/weather"}
        ```

        ## Discovery

        Clients fetch the card from a well known path on the agent host.
    """)


@pytest.fixture
def page_with_intro() -> str:
    def _page(intro_words: int) -> str:
        intro = " ".join(f"word{i}" for i in range(intro_words))
        return f"{intro}\n\n## First\n\nAlpha body text.\n\n## Second\n\nBeta body text.\n"
    return _page


@pytest.fixture
def sample_page_file(tmp_path: Path, agent_card_page: str) -> Path:
    p = tmp_path / "agent-card.md"
    p.write_text(agent_card_page, encoding="utf-8")
    return p
