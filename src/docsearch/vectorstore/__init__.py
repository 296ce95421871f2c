"""Vector store backends — Supabase/pgvector (production) and FAISS (local)."""

from docsearch.vectorstore.base import HybridSearchUnavailable, VectorStore, VectorStoreError
from docsearch.vectorstore.factory import available_stores, get_vector_store
from docsearch.vectorstore.schemas import MetadataFilter, SearchResult, VectorRecord

__all__ = [
    "HybridSearchUnavailable",
    "MetadataFilter",
    "SearchResult",
    "VectorRecord",
    "VectorStore",
    "VectorStoreError",
    "available_stores",
    "get_vector_store",
]
