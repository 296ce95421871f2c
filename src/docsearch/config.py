"""Application settings loaded from YAML with environment variable overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

DEFAULT_BASE_URL = "https://google-a2a.vercel.app"

# ---------------------------------------------------------------------------
# Settings sections
# ---------------------------------------------------------------------------


class ChunkingSettings(BaseModel):
    target_chunk_size: int = 400
    max_chunk_size: int = 800
    overlap_size: int = 75
    respect_code_blocks: bool = True
    include_hierarchical_context: bool = True


class EmbeddingSettings(BaseModel):
    provider: str = "openai"
    model: str = "text-embedding-3-small"
    dimension: int = 1536
    max_retries: int = 2
    batch_size: int = 100
    batch_delay: float = 0.1
    api_key: str | None = None


class VectorStoreSettings(BaseModel):
    backend: str = "supabase"
    url: str | None = None
    api_key: str | None = None
    table: str = "document_embeddings"
    match_function: str = "match_documents"
    hybrid_function: str = "hybrid_match_documents"
    insert_batch_size: int = 50
    path: str = "local_data/vectorstore"


class SearchSettings(BaseModel):
    limit: int = 10
    threshold: float = 0.2
    strategy: str = "adaptive"
    context_window: int = 2000
    agent_limit: int = 5


class IngestionSettings(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    supported_formats: list[str] = Field(
        default_factory=lambda: [".md", ".mdx", ".txt"]
    )
    skip_existing: bool = False
    validate_embeddings: bool = True


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseModel):
    chunking: ChunkingSettings = Field(default_factory=ChunkingSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    vectorstore: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)


def _find_settings_file() -> Path | None:
    """Walk up from cwd looking for settings.yaml."""
    profile = os.getenv("DOCSEARCH_PROFILE", "")
    names = [f"settings-{profile}.yaml", "settings.yaml"] if profile else ["settings.yaml"]

    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        for name in names:
            candidate = parent / name
            if candidate.exists():
                return candidate
    return None


def _apply_env_overrides(settings: Settings) -> Settings:
    """Secrets and deployment URLs come from the environment, never YAML."""
    if api_key := os.getenv("OPENAI_API_KEY"):
        settings.embedding.api_key = api_key
    if url := os.getenv("SUPABASE_URL"):
        settings.vectorstore.url = url
    if key := os.getenv("SUPABASE_SERVICE_ROLE_KEY"):
        settings.vectorstore.api_key = key
    if base_url := os.getenv("DOCSEARCH_BASE_URL"):
        settings.ingestion.base_url = base_url
    return settings


def load_settings() -> Settings:
    """Load settings from YAML file, falling back to defaults."""
    path = _find_settings_file()
    if path is None:
        return _apply_env_overrides(Settings())

    with open(path, encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}

    return _apply_env_overrides(Settings(**raw))
