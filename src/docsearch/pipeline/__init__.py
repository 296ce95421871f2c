"""End-to-end pipelines — ingest pages, search for agents, citations."""

from docsearch.pipeline.agent import AgentSearch
from docsearch.pipeline.citations import build_citation, format_citations, format_result
from docsearch.pipeline.ingest import IngestPipeline
from docsearch.pipeline.schemas import AgentSearchResponse, Citation, FormattedResult, IngestResult

__all__ = [
    "AgentSearch",
    "AgentSearchResponse",
    "Citation",
    "FormattedResult",
    "IngestPipeline",
    "IngestResult",
    "build_citation",
    "format_citations",
    "format_result",
]
