"""Data models for the ingest and agent search pipelines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from docsearch.documents.schemas import DocumentMetadata
from docsearch.retrieval.schemas import SearchSummary


@dataclass
class Citation:
    """Where a passage came from, ready to render as a link."""

    text: str
    url: str
    title: str
    section: str = ""

    @property
    def markdown(self) -> str:
        return f"[{self.text}]({self.url})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "url": self.url,
            "title": self.title,
            "section": self.section,
        }


@dataclass
class FormattedResult:
    """A search hit shaped for an answering agent."""

    index: int
    content: str
    metadata: dict[str, Any]
    similarity: float
    match_type: str
    citation: Citation
    citation_text: str
    original_content: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "content": self.content,
            "metadata": self.metadata,
            "similarity": self.similarity,
            "matchType": self.match_type,
            "citation": self.citation.to_dict(),
            "citationText": self.citation_text,
            "originalContent": self.original_content,
        }


@dataclass
class AgentSearchResponse:
    """Output of ``AgentSearch.search_for_agent``."""

    query: str
    results: list[FormattedResult] = field(default_factory=list)
    total_results: int = 0
    strategy: str = ""
    summary: SearchSummary | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "results": [r.to_dict() for r in self.results],
            "totalResults": self.total_results,
            "strategy": self.strategy,
            "summary": self.summary.to_dict() if self.summary else None,
        }


@dataclass
class IngestResult:
    """Result of embedding one page."""

    document_metadata: DocumentMetadata
    chunks_processed: int = 0
    embeddings_generated: int = 0
    chunks_stored: int = 0
    tokens_used: int = 0
    skipped: int = 0
    source: str | None = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "documentMetadata": {
                "title": self.document_metadata.title,
                "url": self.document_metadata.url,
                "description": self.document_metadata.description,
            },
            "chunksProcessed": self.chunks_processed,
            "embeddingsGenerated": self.embeddings_generated,
            "chunksStored": self.chunks_stored,
            "tokensUsed": self.tokens_used,
            "skipped": self.skipped,
            "source": self.source,
            "warnings": self.warnings,
        }
