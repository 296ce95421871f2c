"""Embedding providers — OpenAI, Ollama."""

from docsearch.embeddings.base import BatchEmbeddingResult, EmbeddingProvider, EmbeddingResult
from docsearch.embeddings.factory import available_providers, get_embedding_provider
from docsearch.embeddings.validation import (
    InvalidEmbeddingError,
    is_valid_embedding,
    validate_embedding,
)

__all__ = [
    "BatchEmbeddingResult",
    "EmbeddingProvider",
    "EmbeddingResult",
    "InvalidEmbeddingError",
    "available_providers",
    "get_embedding_provider",
    "is_valid_embedding",
    "validate_embedding",
]
