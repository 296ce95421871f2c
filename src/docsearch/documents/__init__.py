"""Document source and markdown page parsing."""

from docsearch.documents.loader import DocumentLoader
from docsearch.documents.parser import (
    extract_heading_structure,
    generate_anchor,
    parse_document_metadata,
)
from docsearch.documents.schemas import DocumentMetadata, HeadingNode, LoadResult

__all__ = [
    "DocumentLoader",
    "DocumentMetadata",
    "HeadingNode",
    "LoadResult",
    "extract_heading_structure",
    "generate_anchor",
    "parse_document_metadata",
]
