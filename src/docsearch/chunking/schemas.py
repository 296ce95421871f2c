"""Data models for chunks."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from docsearch.documents.schemas import DocumentMetadata, HeadingNode


class ChunkType(StrEnum):
    """Role a chunk plays within its page."""

    INTRO = "intro"
    SECTION = "section"
    SUBSECTION = "subsection"
    DEFINITION = "definition"
    EXAMPLE = "example"


@dataclass
class ChunkMetadata:
    """Metadata carried by each chunk — stored alongside embeddings.

    ``to_dict`` uses the camelCase keys of the stored JSON payload so that
    rows written by other clients of the same table stay readable.
    """

    title: str
    url: str
    heading_path: str
    chunk_type: ChunkType = ChunkType.SECTION
    chunk_index: int = 0
    word_count: int = 0
    has_overlap: bool = False
    section: str | None = None
    subsection: str | None = None
    anchor: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "title": self.title,
            "url": self.url,
            "headingPath": self.heading_path,
            "chunkType": self.chunk_type.value,
            "chunkIndex": self.chunk_index,
            "wordCount": self.word_count,
            "hasOverlap": self.has_overlap,
        }
        if self.section is not None:
            d["section"] = self.section
        if self.subsection is not None:
            d["subsection"] = self.subsection
        if self.anchor is not None:
            d["anchor"] = self.anchor
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChunkMetadata:
        return cls(
            title=data.get("title", ""),
            url=data.get("url", ""),
            heading_path=data.get("headingPath", ""),
            chunk_type=ChunkType(data.get("chunkType", ChunkType.SECTION.value)),
            chunk_index=data.get("chunkIndex", 0),
            word_count=data.get("wordCount", 0),
            has_overlap=data.get("hasOverlap", False),
            section=data.get("section"),
            subsection=data.get("subsection"),
            anchor=data.get("anchor"),
        )


@dataclass
class Chunk:
    """A single retrievable passage of a page.

    ``contextual_content`` is what gets embedded: the passage prefixed with
    its heading breadcrumb so short or generic passages stay distinguishable.
    """

    content: str
    contextual_content: str
    metadata: ChunkMetadata


@dataclass
class ChunkedDocument:
    """Output of chunking one page."""

    metadata: DocumentMetadata
    chunks: list[Chunk] = field(default_factory=list)
    heading_tree: list[HeadingNode] = field(default_factory=list)
    is_empty: bool = False
