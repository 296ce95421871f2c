"""Retrieval — threshold strategies over vector similarity search."""

from docsearch.retrieval.retriever import Retriever, summarize
from docsearch.retrieval.schemas import SearchOptions, SearchResponse, SearchSummary, StrategyResult
from docsearch.retrieval.strategies import (
    AdaptiveStrategy,
    HybridStrategy,
    ProgressiveStrategy,
    SearchStrategy,
    analyze_query,
    available_strategies,
    get_strategy,
)

__all__ = [
    "AdaptiveStrategy",
    "HybridStrategy",
    "ProgressiveStrategy",
    "Retriever",
    "SearchOptions",
    "SearchResponse",
    "SearchStrategy",
    "SearchSummary",
    "StrategyResult",
    "analyze_query",
    "available_strategies",
    "get_strategy",
    "summarize",
]
