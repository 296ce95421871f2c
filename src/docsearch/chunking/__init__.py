"""Heading-aware markdown chunking."""

from docsearch.chunking.markdown_chunker import MarkdownChunker, analyze_chunking, chunk_document
from docsearch.chunking.schemas import Chunk, ChunkedDocument, ChunkMetadata, ChunkType
from docsearch.chunking.splitting import count_words, split_at_natural_boundaries

__all__ = [
    "Chunk",
    "ChunkMetadata",
    "ChunkType",
    "ChunkedDocument",
    "MarkdownChunker",
    "analyze_chunking",
    "chunk_document",
    "count_words",
    "split_at_natural_boundaries",
]
