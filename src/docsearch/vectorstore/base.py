"""Abstract base class for vector stores."""

from __future__ import annotations

from abc import ABC, abstractmethod

from docsearch.vectorstore.schemas import MetadataFilter, SearchResult, VectorRecord


class HybridSearchUnavailable(NotImplementedError):
    """The backend has no multi-signal search function."""


class VectorStoreError(RuntimeError):
    """A remote vector store call failed."""


class VectorStore(ABC):
    """Interface for vector store backends."""

    @abstractmethod
    def add(self, records: list[VectorRecord]) -> int:
        """Insert records into the store.

        Records with malformed embeddings are skipped with a warning rather
        than failing the whole batch.

        Returns:
            Number of records successfully inserted.
        """

    @abstractmethod
    def match(
        self,
        query_embedding: list[float],
        threshold: float,
        limit: int = 10,
        metadata_filter: MetadataFilter | None = None,
    ) -> list[SearchResult]:
        """Vector similarity search.

        Args:
            query_embedding: The query vector.
            threshold: Minimum similarity a hit must reach.
            limit: Maximum results to return.
            metadata_filter: Optional metadata filter.

        Returns:
            ``SearchResult`` list sorted by similarity (highest first).
        """

    def hybrid_match(
        self,
        query_embedding: list[float],
        threshold: float,
        limit: int = 10,
    ) -> list[SearchResult]:
        """Multi-signal search (optional). ``match_type`` tells which signal hit."""
        raise HybridSearchUnavailable(
            f"{self.__class__.__name__} does not support hybrid search"
        )

    @abstractmethod
    def text_search(self, query: str, limit: int = 10) -> list[SearchResult]:
        """Case-insensitive substring match over content and heading path.

        No similarity is computed; every hit carries similarity 0.7 and
        match type ``text``.
        """

    @abstractmethod
    def count_by_title(self, title: str) -> int:
        """Number of stored chunks belonging to the page ``title``."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of records in the store."""

    @abstractmethod
    def clear(self) -> None:
        """Delete all records."""

    @classmethod
    def store_name(cls) -> str:
        """Return human-readable store name."""
        return cls.__name__
