"""Embedding provider factory — registry, lazy import, singleton cache.

Follows the same pattern as vectorstore/factory.py.
"""

from __future__ import annotations

import importlib
import logging

from docsearch.config import EmbeddingSettings
from docsearch.embeddings.base import EmbeddingProvider

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Provider registry: (provider_key, module_path, class_name)
# ---------------------------------------------------------------------------

_PROVIDER_REGISTRY: list[tuple[str, str, str]] = [
    ("openai", "docsearch.embeddings.openai_provider", "OpenAIEmbeddingProvider"),
    ("ollama", "docsearch.embeddings.ollama_provider", "OllamaEmbeddingProvider"),
]

# Singleton cache
_provider_cache: dict[str, EmbeddingProvider] = {}


def get_embedding_provider(
    provider: str = "openai",
    **kwargs,
) -> EmbeddingProvider:
    """Get an embedding provider by name.

    Args:
        provider: One of ``openai``, ``ollama``.
        **kwargs: Passed to the provider constructor.

    Returns:
        An ``EmbeddingProvider`` instance.
    """
    key = provider.lower()

    if not kwargs and key in _provider_cache:
        return _provider_cache[key]

    for reg_key, module_path, cls_name in _PROVIDER_REGISTRY:
        if reg_key == key:
            mod = importlib.import_module(module_path)
            cls = getattr(mod, cls_name)
            instance = cls(**kwargs)
            if not kwargs:
                _provider_cache[key] = instance
            return instance

    available = [k for k, _, _ in _PROVIDER_REGISTRY]
    raise ValueError(f"Unknown embedding provider '{provider}'. Available: {available}")


def provider_from_settings(settings: EmbeddingSettings) -> EmbeddingProvider:
    """Build the configured provider with its model and retry settings."""
    kwargs: dict = {"model": settings.model, "max_retries": settings.max_retries}
    if settings.provider.lower() == "openai":
        kwargs["api_key"] = settings.api_key
        kwargs["dimensions"] = settings.dimension
    else:
        kwargs["dimension"] = settings.dimension
    return get_embedding_provider(settings.provider, **kwargs)


def available_providers() -> list[str]:
    """Return names of registered embedding providers."""
    return [k for k, _, _ in _PROVIDER_REGISTRY]


def clear_cache() -> None:
    """Clear singleton cache (for testing)."""
    _provider_cache.clear()
