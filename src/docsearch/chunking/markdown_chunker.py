"""Heading-aware chunker for exported documentation pages.

Walks the heading forest depth-first. Each heading's own content becomes one
chunk when it fits within ``max_chunk_size`` words; larger sections are split
at paragraph and sentence boundaries into ``target_chunk_size`` pieces that
borrow words from their neighbours for continuity. Text before the first
heading becomes an introduction chunk when it is long enough.
"""

from __future__ import annotations

import logging

from docsearch.chunking.schemas import Chunk, ChunkedDocument, ChunkMetadata, ChunkType
from docsearch.chunking.splitting import count_words, split_at_natural_boundaries
from docsearch.config import ChunkingSettings
from docsearch.documents.parser import (
    extract_heading_structure,
    find_first_heading,
    parse_document_metadata,
)
from docsearch.documents.schemas import DocumentMetadata, HeadingNode

logger = logging.getLogger(__name__)

MIN_INTRO_WORDS = 20


def heading_path(node: HeadingNode, parents: list[HeadingNode]) -> str:
    return " > ".join([p.text for p in parents] + [node.text])


def classify_heading(node: HeadingNode, parents: list[HeadingNode]) -> ChunkType:
    """Pick a chunk type. Rules are applied in order and the last match wins."""
    chunk_type = ChunkType.SECTION
    if node.level == 3:
        chunk_type = ChunkType.SUBSECTION
    if "example" in node.text.lower():
        chunk_type = ChunkType.EXAMPLE
    if not parents and node.level == 2:
        chunk_type = ChunkType.DEFINITION
    return chunk_type


class MarkdownChunker:
    """Split one markdown page into context-annotated chunks."""

    def __init__(self, options: ChunkingSettings | None = None):
        self.options = options or ChunkingSettings()

    def chunk(self, text: str, base_url: str = "") -> ChunkedDocument:
        """Chunk a page.

        Args:
            text: Raw page text, starting with the title and URL lines.
            base_url: Site origin prepended to the page URL.

        Returns:
            A ``ChunkedDocument`` with page metadata, chunks in document order
            and the heading forest they were derived from.
        """
        metadata = parse_document_metadata(text, base_url)
        tree = extract_heading_structure(text)

        chunks: list[Chunk] = []
        for root in tree:
            self._process_heading(root, [], metadata, chunks)

        intro = self._intro_chunk(text, metadata)
        if intro is not None:
            chunks.insert(0, intro)
            for i, c in enumerate(chunks):
                c.metadata.chunk_index = i

        is_empty = bool(text.strip()) and not chunks
        if is_empty:
            logger.warning(
                "Page '%s' has content but produced no chunks (no headings found)",
                metadata.title,
            )

        logger.info(
            "MarkdownChunker produced %d chunks from '%s' (%d top-level sections)",
            len(chunks), metadata.title, len(tree),
        )
        return ChunkedDocument(
            metadata=metadata,
            chunks=chunks,
            heading_tree=tree,
            is_empty=is_empty,
        )

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _process_heading(
        self,
        node: HeadingNode,
        parents: list[HeadingNode],
        doc: DocumentMetadata,
        chunks: list[Chunk],
    ) -> None:
        path = heading_path(node, parents)
        words = count_words(node.content)

        base = dict(
            title=doc.title,
            url=doc.full_url,
            chunk_type=classify_heading(node, parents),
            section=parents[0].text if parents else None,
            subsection=node.text if node.level == 3 else None,
            anchor=f"#{node.anchor}",
        )

        if words <= self.options.max_chunk_size:
            chunks.append(Chunk(
                content=node.content,
                contextual_content=self._contextualize(path, node.text, node.content),
                metadata=ChunkMetadata(
                    heading_path=path,
                    chunk_index=len(chunks),
                    word_count=words,
                    has_overlap=False,
                    **base,
                ),
            ))
        else:
            pieces = split_at_natural_boundaries(
                node.content,
                self.options.target_chunk_size,
                respect_code_blocks=self.options.respect_code_blocks,
            )
            total = len(pieces)
            for i, piece in enumerate(pieces):
                is_first = i == 0
                is_last = i == total - 1
                content = self._with_overlap(pieces, i)
                part_path = path + (f" (Part {i + 1}/{total})" if total > 1 else "")

                chunks.append(Chunk(
                    content=content,
                    contextual_content=self._contextualize(part_path, node.text, content),
                    metadata=ChunkMetadata(
                        heading_path=part_path,
                        chunk_index=len(chunks),
                        word_count=count_words(content),
                        has_overlap=not (is_first and is_last),
                        **base,
                    ),
                ))

        for child in node.children:
            self._process_heading(child, [*parents, node], doc, chunks)

    def _with_overlap(self, pieces: list[str], i: int) -> str:
        """Splice the tail of the previous piece and the head of the next."""
        overlap = self.options.overlap_size
        content = pieces[i]
        if overlap <= 0:
            return content

        if i > 0:
            tail = pieces[i - 1].split()[-overlap:]
            content = " ".join(tail) + "\n\n" + content

        forward = overlap // 2
        if i < len(pieces) - 1 and forward > 0:
            head = pieces[i + 1].split()[:forward]
            content = content + "\n\n" + " ".join(head)

        return content

    def _contextualize(self, path: str, heading: str, content: str) -> str:
        if self.options.include_hierarchical_context:
            return f"Context: {path}\n\n## {heading}\n\n{content}"
        return f"## {heading}\n\n{content}"

    def _intro_chunk(self, text: str, doc: DocumentMetadata) -> Chunk | None:
        first_heading = find_first_heading(text)
        if first_heading <= 0:
            return None

        intro = "\n".join(text.split("\n")[:first_heading]).strip()
        words = count_words(intro)
        if words < MIN_INTRO_WORDS:
            return None

        path = f"{doc.title} - Introduction"
        contextual = intro
        if self.options.include_hierarchical_context:
            contextual = f"Context: {path}\n\n{intro}"

        return Chunk(
            content=intro,
            contextual_content=contextual,
            metadata=ChunkMetadata(
                title=doc.title,
                url=doc.full_url,
                heading_path=path,
                chunk_type=ChunkType.INTRO,
                chunk_index=0,
                word_count=words,
                has_overlap=False,
            ),
        )


def chunk_document(
    text: str,
    base_url: str = "",
    options: ChunkingSettings | None = None,
) -> ChunkedDocument:
    """Functional entry point: ``MarkdownChunker(options).chunk(text, base_url)``."""
    return MarkdownChunker(options).chunk(text, base_url)


def analyze_chunking(document: ChunkedDocument) -> list[dict]:
    """Summarize chunks as display rows (type, path, words, link, preview)."""
    rows = []
    for c in document.chunks:
        meta = c.metadata
        rows.append({
            "index": meta.chunk_index,
            "type": meta.chunk_type.value,
            "path": meta.heading_path,
            "words": meta.word_count,
            "link": f"{meta.url}{meta.anchor or ''}",
            "preview": c.content[:100],
        })
    return rows
