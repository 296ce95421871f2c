"""Abstract base class for embedding providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class EmbeddingResult:
    """One embedding plus the tokens the provider billed for it."""

    vector: list[float]
    token_count: int = 0


@dataclass
class BatchEmbeddingResult:
    """Embeddings for a batch of texts, in input order."""

    vectors: list[list[float]] = field(default_factory=list)
    total_tokens: int = 0


class EmbeddingProvider(ABC):
    """Interface for text embedding models."""

    model: str = ""

    @abstractmethod
    def embed(self, text: str) -> EmbeddingResult:
        """Embed a single text.

        Provider errors propagate; retries are left to the provider client.
        """

    @abstractmethod
    def embed_many(self, texts: list[str]) -> BatchEmbeddingResult:
        """Embed a batch of texts.

        Args:
            texts: Strings to embed.

        Returns:
            Vectors in the same order as ``texts`` and the summed token usage.
        """

    def embed_query(self, query: str) -> list[float]:
        """Embed a search query and return only the vector."""
        return self.embed(query).vector

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Return the embedding dimensionality."""

    @classmethod
    def provider_name(cls) -> str:
        """Return human-readable provider name."""
        return cls.__name__
