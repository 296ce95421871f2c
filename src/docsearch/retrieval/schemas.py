"""Data models for retrieval operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from docsearch.config import SearchSettings
from docsearch.vectorstore.schemas import SearchResult


@dataclass
class SearchOptions:
    """Per-call search configuration."""

    limit: int = 10
    threshold: float = 0.2
    strategy: str = "adaptive"
    document_filter: str | None = None
    context_window: int = 2000

    @classmethod
    def from_settings(cls, settings: SearchSettings, **overrides: Any) -> SearchOptions:
        opts = cls(
            limit=settings.limit,
            threshold=settings.threshold,
            strategy=settings.strategy,
            context_window=settings.context_window,
        )
        for key, value in overrides.items():
            if value is not None:
                setattr(opts, key, value)
        return opts


@dataclass
class StrategyResult:
    """Passages found by one strategy and the label explaining how."""

    results: list[SearchResult] = field(default_factory=list)
    strategy: str = ""


@dataclass
class SearchSummary:
    """Hints for the consumer: was anything found, and what to try next."""

    query_handled: bool
    top_similarity: float
    documents_found: int
    suggested_threshold: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "queryHandled": self.query_handled,
            "topSimilarity": self.top_similarity,
            "documentsFound": self.documents_found,
            "suggestedThreshold": self.suggested_threshold,
        }


@dataclass
class SearchResponse:
    """Result of a retrieval call."""

    query: str
    results: list[SearchResult] = field(default_factory=list)
    total_results: int = 0
    strategy: str = ""
    summary: SearchSummary | None = None
