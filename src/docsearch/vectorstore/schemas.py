"""Data models for vector store operations.

Chunk metadata travels as a plain dict (the JSON payload stored next to each
embedding) so rows written by other clients round-trip untouched.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

TEXT_MATCH_SIMILARITY = 0.7


@dataclass
class VectorRecord:
    """A chunk with its embedding, ready for storage."""

    id: str
    content: str
    embedding: list[float]
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SearchResult:
    """A single candidate passage returned by the store."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    similarity: float = 0.0
    match_type: str = "vector"

    @classmethod
    def from_row(cls, row: dict[str, Any], match_type: str = "vector") -> SearchResult:
        """Build from a store row; metadata may arrive JSON-encoded."""
        return cls(
            content=row.get("content", ""),
            metadata=decode_metadata(row.get("metadata")),
            similarity=float(row.get("similarity") or 0.0),
            match_type=row.get("match_type") or match_type,
        )


def decode_metadata(raw: Any) -> dict[str, Any]:
    if raw is None:
        return {}
    if isinstance(raw, str):
        return json.loads(raw)
    return dict(raw)


@dataclass
class MetadataFilter:
    """Filter search results by metadata fields.

    All specified fields must match (AND logic).
    """

    title: str | None = None
    section: str | None = None
    chunk_type: str | None = None

    def matches(self, meta: dict[str, Any]) -> bool:
        """Check if a chunk's metadata matches this filter."""
        if self.title and meta.get("title") != self.title:
            return False
        if self.section and meta.get("section") != self.section:
            return False
        return not (self.chunk_type and meta.get("chunkType") != self.chunk_type)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the ``filter_metadata`` JSON the RPC functions accept."""
        d: dict[str, Any] = {}
        if self.title:
            d["title"] = self.title
        if self.section:
            d["section"] = self.section
        if self.chunk_type:
            d["chunkType"] = self.chunk_type
        return d
