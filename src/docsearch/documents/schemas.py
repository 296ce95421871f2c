"""Data models for parsed documentation pages."""

from __future__ import annotations

from dataclasses import dataclass, field

UNTITLED_DOCUMENT = "Untitled Document"
UNKNOWN_URL = "/docs/unknown"


@dataclass(frozen=True)
class DocumentMetadata:
    """Header information parsed from the first lines of a page."""

    title: str = UNTITLED_DOCUMENT
    url: str = UNKNOWN_URL
    description: str | None = None
    base_url: str = ""

    @property
    def full_url(self) -> str:
        return f"{self.base_url}{self.url}"


@dataclass
class HeadingNode:
    """One markdown heading and the raw lines beneath it.

    Attributes:
        level: Heading depth, 1 to 6.
        text: Heading text without the leading hashes.
        anchor: URL-safe fragment derived from ``text``.
        start_line: Index of the heading line.
        end_line: Index of the last line owned by this heading (inclusive).
        content: Trimmed text between the heading and ``end_line``. This
            includes any nested headings' lines.
        children: Headings nested strictly under this one.
    """

    level: int
    text: str
    anchor: str
    start_line: int
    end_line: int | None = None
    content: str = ""
    children: list[HeadingNode] = field(default_factory=list)

    def walk(self):
        """Yield this node and its descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class LoadResult:
    """A raw page read from the document source."""

    text: str
    source_path: str | None = None
    format: str = ""
    char_count: int = 0
    warnings: list[str] = field(default_factory=list)
