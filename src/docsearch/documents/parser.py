"""Markdown page parsing: header metadata, anchors, and the heading forest.

Pages exported by the docs site begin with a ``# Title`` line followed by a
``URL: /docs/...`` line. An optional frontmatter-like block is introduced by
a ``***`` separator and closed by a ``---`` line.
"""

from __future__ import annotations

import logging
import re

from docsearch.documents.schemas import (
    UNKNOWN_URL,
    UNTITLED_DOCUMENT,
    DocumentMetadata,
    HeadingNode,
)

logger = logging.getLogger(__name__)

_TITLE_RE = re.compile(r"^#\s+(.+)$")
_URL_RE = re.compile(r"^URL:\s+(.+)$")
HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")

# Frontmatter is assumed closed if no ``---`` shows up within this many lines
_FRONTMATTER_SCAN_LIMIT = 10


def _find_separator(lines: list[str]) -> int:
    for i, line in enumerate(lines):
        if line.strip() == "***":
            return i
    return -1


def parse_document_metadata(text: str, base_url: str = "") -> DocumentMetadata:
    """Read title, URL and optional description from the page header.

    Missing lines fall back to ``Untitled Document`` and ``/docs/unknown``.
    """
    lines = text.split("\n")

    title_match = _TITLE_RE.match(lines[0]) if lines else None
    title = title_match.group(1) if title_match else UNTITLED_DOCUMENT

    url_match = _URL_RE.match(lines[1]) if len(lines) > 1 else None
    url = url_match.group(1) if url_match else UNKNOWN_URL

    description = None
    separator = _find_separator(lines)
    if -1 < separator < len(lines) - 1:
        for line in lines[separator + 1:]:
            if not line.strip() or "---" in line:
                continue
            if line.strip().startswith(("title:", "icon:")):
                continue
            description = line.strip()
            break

    return DocumentMetadata(
        title=title,
        url=url,
        description=description,
        base_url=base_url,
    )


def generate_anchor(text: str) -> str:
    """Turn heading text into a URL fragment (``Agent Card`` -> ``agent-card``)."""
    anchor = text.lower()
    anchor = re.sub(r"[^A-Za-z0-9_\s-]", "", anchor)
    anchor = re.sub(r"\s+", "-", anchor)
    anchor = re.sub(r"-+", "-", anchor)
    return anchor.strip()


def _content_start(lines: list[str]) -> int:
    """Index of the first line after the frontmatter block, or 0."""
    separator = _find_separator(lines)
    if separator == -1:
        return 0
    for i in range(separator + 1, len(lines)):
        if "---" in lines[i] or (
            i > separator + _FRONTMATTER_SCAN_LIMIT and lines[i].strip()
        ):
            return i + 1
    return 0


def extract_heading_structure(text: str) -> list[HeadingNode]:
    """Build the heading forest for a page.

    A heading of level L closes every open heading of level >= L, becomes a
    child of whatever remains on top of the stack (or a root), and is then
    pushed itself.
    """
    lines = text.split("\n")
    roots: list[HeadingNode] = []
    stack: list[HeadingNode] = []

    for i in range(_content_start(lines), len(lines)):
        match = HEADING_RE.match(lines[i])
        if not match:
            continue

        heading_text = match.group(2).strip()
        node = HeadingNode(
            level=len(match.group(1)),
            text=heading_text,
            anchor=generate_anchor(heading_text),
            start_line=i,
        )

        while stack and stack[-1].level >= node.level:
            stack.pop().end_line = i - 1

        if stack:
            stack[-1].children.append(node)
        else:
            roots.append(node)
        stack.append(node)

    while stack:
        stack.pop().end_line = len(lines) - 1

    for root in roots:
        for node in root.walk():
            end = node.end_line if node.end_line is not None else len(lines) - 1
            node.content = "\n".join(lines[node.start_line + 1:end + 1]).strip()

    return roots


def find_first_heading(text: str) -> int:
    """Line index of the first markdown heading, or -1 when there is none."""
    for i, line in enumerate(text.split("\n")):
        if re.match(r"^#{1,6}\s+", line):
            return i
    return -1
