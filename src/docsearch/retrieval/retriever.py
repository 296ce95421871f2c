"""Retriever — embed query, run a search strategy, summarize the outcome."""

from __future__ import annotations

import logging

from docsearch.config import SearchSettings
from docsearch.embeddings.base import EmbeddingProvider
from docsearch.embeddings.validation import validate_embedding
from docsearch.retrieval.schemas import SearchOptions, SearchResponse, SearchSummary
from docsearch.retrieval.strategies import get_strategy
from docsearch.vectorstore.base import VectorStore
from docsearch.vectorstore.schemas import SearchResult

logger = logging.getLogger(__name__)


def summarize(
    results: list[SearchResult],
    threshold: float,
) -> SearchSummary:
    """Build the consumer-facing summary for a result list.

    When nothing was found the suggested threshold is one step lower
    (floored at 0.1); otherwise it echoes the threshold that was used.
    """
    if results:
        suggested = threshold
    else:
        suggested = max(0.1, round(threshold - 0.1, 2))
    return SearchSummary(
        query_handled=bool(results),
        top_similarity=results[0].similarity if results else 0.0,
        documents_found=len({r.metadata.get("title") for r in results}),
        suggested_threshold=suggested,
    )


class Retriever:
    """Orchestrates embedding → strategy search → document filter → summary."""

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        vector_store: VectorStore,
        settings: SearchSettings | None = None,
    ):
        self.embedding_provider = embedding_provider
        self.vector_store = vector_store
        self.settings = settings or SearchSettings()

    def search(
        self,
        query: str,
        options: SearchOptions | None = None,
    ) -> SearchResponse:
        """Search the documentation for ``query``.

        Args:
            query: Free-text query.
            options: Limit, threshold, strategy and document filter. Defaults
                come from ``SearchSettings``.

        Returns:
            A ``SearchResponse`` labelled with the strategy attempt that won.

        Raises:
            ValueError: Unknown strategy name.
            InvalidEmbeddingError: The provider returned a malformed vector.
        """
        opts = options or SearchOptions.from_settings(self.settings)
        strategy = get_strategy(opts.strategy)

        query_embedding = validate_embedding(self.embedding_provider.embed_query(query))

        outcome = strategy.search(
            query,
            query_embedding,
            self.vector_store,
            opts.limit,
            opts.threshold,
        )

        results = outcome.results
        if opts.document_filter:
            results = [r for r in results if r.metadata.get("title") == opts.document_filter]

        logger.info(
            "Search returned %d results via %s (filter=%s)",
            len(results),
            outcome.strategy,
            opts.document_filter,
        )

        return SearchResponse(
            query=query,
            results=results,
            total_results=len(results),
            strategy=outcome.strategy,
            summary=summarize(results, opts.threshold),
        )
