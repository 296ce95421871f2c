"""Agent-facing search — adaptive retrieval plus citation formatting."""

from __future__ import annotations

import logging

from docsearch.config import SearchSettings
from docsearch.pipeline.citations import format_result
from docsearch.pipeline.schemas import AgentSearchResponse
from docsearch.retrieval.retriever import Retriever
from docsearch.retrieval.schemas import SearchOptions, SearchSummary

logger = logging.getLogger(__name__)


class AgentSearch:
    """Wraps a ``Retriever`` and returns citation-ready passages."""

    def __init__(self, retriever: Retriever, settings: SearchSettings | None = None):
        self.retriever = retriever
        self.settings = settings or retriever.settings

    def search_for_agent(
        self,
        query: str,
        limit: int | None = None,
        threshold: float | None = None,
        context_window: int | None = None,
        document_filter: str | None = None,
    ) -> AgentSearchResponse:
        """Search with the adaptive strategy and format hits for an agent.

        Twice ``limit`` candidates are fetched and the best ``limit`` kept.
        Content longer than ``context_window`` characters is truncated.
        """
        limit = limit if limit is not None else self.settings.agent_limit
        threshold = threshold if threshold is not None else self.settings.threshold
        context_window = (
            context_window if context_window is not None else self.settings.context_window
        )

        response = self.retriever.search(
            query,
            SearchOptions(
                limit=limit * 2,
                threshold=threshold,
                strategy="adaptive",
                document_filter=document_filter,
                context_window=context_window,
            ),
        )

        formatted = [
            format_result(result, index, context_window)
            for index, result in enumerate(response.results[:limit], start=1)
        ]

        base = response.summary
        summary = SearchSummary(
            query_handled=base.query_handled,
            top_similarity=base.top_similarity,
            documents_found=len({r.citation.title for r in formatted}),
            suggested_threshold=base.suggested_threshold,
        )

        logger.info(
            "Agent search for %r: %d passages from %d documents via %s",
            query, len(formatted), summary.documents_found, response.strategy,
        )

        return AgentSearchResponse(
            query=response.query,
            results=formatted,
            total_results=response.total_results,
            strategy=response.strategy,
            summary=summary,
        )
