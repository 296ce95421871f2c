"""Search strategies: how similarity thresholds are tried and when to give up.

Each strategy is stateless. It issues sequential store calls and the first
attempt that yields enough hits wins. The label on the returned
``StrategyResult`` records which attempt that was, e.g.
``adaptive_fallback_0.3``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from docsearch.retrieval.schemas import StrategyResult
from docsearch.vectorstore.base import HybridSearchUnavailable, VectorStore, VectorStoreError

logger = logging.getLogger(__name__)

_QUESTION_WORDS = ("what", "how", "why", "when", "where")


def _label(threshold: float) -> str:
    return f"{threshold:g}"


@dataclass(frozen=True)
class QueryProfile:
    is_short: bool
    is_question: bool
    is_keyword: bool
    initial_threshold: float


def analyze_query(query: str) -> QueryProfile:
    """Classify a query and pick the threshold for the first attempt.

    Rules are checked in order and each match overrides the previous one:
    short (under 50 chars, no ``?``) -> 0.4, question -> 0.6,
    keyword (at most 4 space-separated tokens) -> 0.45. Otherwise 0.5.
    """
    is_short = len(query) < 50 and "?" not in query
    is_question = "?" in query or query.lower().startswith(_QUESTION_WORDS)
    is_keyword = len(query.split(" ")) <= 4

    threshold = 0.5
    if is_short:
        threshold = 0.4
    if is_question:
        threshold = 0.6
    if is_keyword:
        threshold = 0.45

    return QueryProfile(
        is_short=is_short,
        is_question=is_question,
        is_keyword=is_keyword,
        initial_threshold=threshold,
    )


class SearchStrategy(ABC):
    """A named policy for turning a query embedding into passages."""

    name: ClassVar[str]

    @abstractmethod
    def search(
        self,
        query: str,
        query_embedding: list[float],
        store: VectorStore,
        limit: int,
        threshold: float,
    ) -> StrategyResult:
        """Run the strategy.

        Args:
            query: Raw query text (used by text fallbacks and query analysis).
            query_embedding: Embedded query.
            store: Vector store to search.
            limit: Maximum passages per store call.
            threshold: Caller's minimum similarity.
        """


class AdaptiveStrategy(SearchStrategy):
    """Pick a starting threshold from the query shape, then relax it.

    The caller's threshold is not consulted; the ladder is fixed.
    """

    name = "adaptive"
    fallback_thresholds: tuple[float, ...] = (0.4, 0.3, 0.2)
    initial_min_results = 3
    fallback_min_results = 2

    def search(self, query, query_embedding, store, limit, threshold):
        profile = analyze_query(query)
        initial = profile.initial_threshold
        logger.info(
            "Adaptive search analysis: short=%s question=%s keyword=%s threshold=%s",
            profile.is_short, profile.is_question, profile.is_keyword, initial,
        )

        results = store.match(query_embedding, initial, limit)
        if len(results) >= self.initial_min_results:
            return StrategyResult(results, f"adaptive_initial_{_label(initial)}")

        for fallback in self.fallback_thresholds:
            if fallback >= initial:
                continue
            results = store.match(query_embedding, fallback, limit)
            if len(results) >= self.fallback_min_results:
                return StrategyResult(results, f"adaptive_fallback_{_label(fallback)}")

        return StrategyResult(self._text_fallback(query, store, limit), "adaptive_text_fallback")

    @staticmethod
    def _text_fallback(query: str, store: VectorStore, limit: int):
        try:
            return store.text_search(query, limit)
        except VectorStoreError as exc:
            logger.warning("Text fallback search failed, returning no results: %s", exc)
            return []


class ProgressiveStrategy(SearchStrategy):
    """Walk a descending threshold ladder down to the caller's minimum."""

    name = "progressive"
    thresholds: tuple[float, ...] = (0.7, 0.6, 0.5, 0.4, 0.3, 0.2)
    min_results = 3
    # At or below this threshold a single hit is accepted
    relaxed_threshold = 0.3

    def search(self, query, query_embedding, store, limit, threshold):
        for candidate in self.thresholds:
            if candidate < threshold:
                break
            logger.debug("Progressive search trying threshold %s", candidate)
            results = store.match(query_embedding, candidate, limit)
            if len(results) >= self.min_results or (
                candidate <= self.relaxed_threshold and len(results) >= 1
            ):
                return StrategyResult(results, f"progressive_{_label(candidate)}")

        return StrategyResult([], "progressive_failed")


class HybridStrategy(SearchStrategy):
    """Prefer the store's multi-signal search; fall back to plain similarity."""

    name = "hybrid"

    def search(self, query, query_embedding, store, limit, threshold):
        try:
            results = store.hybrid_match(query_embedding, threshold, limit)
            if results:
                return StrategyResult(results, "hybrid_multi_embedding")
        except (HybridSearchUnavailable, VectorStoreError) as exc:
            logger.info("Hybrid search not available, using fallback: %s", exc)

        results = store.match(query_embedding, threshold, limit)
        return StrategyResult(results, "hybrid_fallback")


_STRATEGIES: dict[str, type[SearchStrategy]] = {
    cls.name: cls for cls in (AdaptiveStrategy, ProgressiveStrategy, HybridStrategy)
}


def get_strategy(name: str) -> SearchStrategy:
    """Instantiate a strategy by name (``adaptive``, ``progressive``, ``hybrid``)."""
    try:
        return _STRATEGIES[name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown search strategy '{name}'. Available: {available_strategies()}"
        ) from None


def available_strategies() -> list[str]:
    return list(_STRATEGIES)
