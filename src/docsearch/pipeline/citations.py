"""Citation building and agent-facing result formatting."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from docsearch.pipeline.schemas import Citation, FormattedResult
from docsearch.vectorstore.schemas import SearchResult

UNKNOWN_DOCUMENT = "Unknown Document"


def build_citation(metadata: dict[str, Any]) -> Citation:
    """Build a citation from stored chunk metadata.

    The link text is ``title - section > subsection`` (or just the title);
    the link target is the page URL plus the heading anchor, if any.
    """
    title = metadata.get("title") or UNKNOWN_DOCUMENT
    section_path = " > ".join(
        part for part in (metadata.get("section"), metadata.get("subsection")) if part
    )
    url = metadata.get("url") or ""
    anchor = metadata.get("anchor") or ""

    return Citation(
        text=f"{title} - {section_path}" if section_path else title,
        url=f"{url}{anchor}" if anchor else url,
        title=title,
        section=section_path,
    )


def truncate(content: str, context_window: int) -> str:
    if len(content) > context_window:
        return content[:context_window] + "..."
    return content


def format_result(result: SearchResult, index: int, context_window: int = 2000) -> FormattedResult:
    """Shape one search hit for agent consumption (``index`` is 1-based)."""
    content = truncate(result.content, context_window)
    citation = build_citation(result.metadata)
    return FormattedResult(
        index=index,
        content=content,
        metadata=result.metadata,
        similarity=result.similarity,
        match_type=result.match_type,
        citation=citation,
        citation_text=citation.markdown,
        original_content=result.metadata.get("originalContent") or content,
    )


def format_citations(results: Sequence[FormattedResult]) -> str:
    """Format citations for display.

    Returns a markdown-formatted source list.
    """
    if not results:
        return ""

    lines = ["\n---\n**Sources:**"]
    for r in results:
        lines.append(f"- [{r.index}] {r.citation_text} ({r.similarity:.2f})")

    return "\n".join(lines)
