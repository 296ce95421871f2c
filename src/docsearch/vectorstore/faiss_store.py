"""FAISS vector store — local, zero infrastructure.

Uses an inner-product index over L2-normalized vectors (so scores are cosine
similarities) with a parallel record dict for metadata and text search.
Useful for building and testing an index without a Supabase project.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import numpy as np

from docsearch.embeddings.validation import is_valid_embedding
from docsearch.vectorstore.base import VectorStore
from docsearch.vectorstore.schemas import (
    TEXT_MATCH_SIMILARITY,
    MetadataFilter,
    SearchResult,
    VectorRecord,
)

logger = logging.getLogger(__name__)


class FAISSStore(VectorStore):
    """FAISS-backed vector store with threshold and metadata filtering."""

    def __init__(self, dimension: int = 1536):
        try:
            import faiss
        except ImportError as exc:
            raise ImportError(
                "faiss-cpu required: pip install docsearch-rag[faiss]"
            ) from exc

        self._faiss = faiss
        self._dimension = dimension
        self._index = faiss.IndexFlatIP(dimension)
        self._records: dict[int, dict] = {}  # int id -> {id, content, metadata}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add(self, records: list[VectorRecord]) -> int:
        valid = []
        for record in records:
            if is_valid_embedding(record.embedding) and len(record.embedding) == self._dimension:
                valid.append(record)
            else:
                logger.warning("Skipping record %s with invalid embedding", record.id)

        if not valid:
            return 0

        vectors = np.array([r.embedding for r in valid], dtype=np.float32)
        self._faiss.normalize_L2(vectors)

        start_id = self._index.ntotal
        self._index.add(vectors)
        for i, record in enumerate(valid):
            self._records[start_id + i] = {
                "id": record.id,
                "content": record.content,
                "metadata": record.metadata,
            }

        logger.info("FAISSStore added %d records (total: %d)", len(valid), self.count())
        return len(valid)

    def match(
        self,
        query_embedding: list[float],
        threshold: float,
        limit: int = 10,
        metadata_filter: MetadataFilter | None = None,
    ) -> list[SearchResult]:
        if self._index.ntotal == 0:
            return []

        query_vec = np.array([query_embedding], dtype=np.float32)
        self._faiss.normalize_L2(query_vec)

        # Scan everything; threshold and filter cut the list afterwards
        scores, indices = self._index.search(query_vec, self._index.ntotal)

        results: list[SearchResult] = []
        for score, idx in zip(scores[0], indices[0], strict=True):
            if idx == -1 or score < threshold:
                continue
            record = self._records[int(idx)]
            if metadata_filter and not metadata_filter.matches(record["metadata"]):
                continue

            results.append(SearchResult(
                content=record["content"],
                metadata=record["metadata"],
                similarity=float(score),
                match_type="vector",
            ))
            if len(results) >= limit:
                break

        return results

    def text_search(self, query: str, limit: int = 10) -> list[SearchResult]:
        needle = query.lower()
        results: list[SearchResult] = []
        for int_id in sorted(self._records):
            record = self._records[int_id]
            heading_path = str(record["metadata"].get("headingPath", ""))
            if needle in record["content"].lower() or needle in heading_path.lower():
                results.append(SearchResult(
                    content=record["content"],
                    metadata=record["metadata"],
                    similarity=TEXT_MATCH_SIMILARITY,
                    match_type="text",
                ))
                if len(results) >= limit:
                    break
        return results

    def count_by_title(self, title: str) -> int:
        return sum(1 for r in self._records.values() if r["metadata"].get("title") == title)

    def count(self) -> int:
        return self._index.ntotal

    def clear(self) -> None:
        self._index = self._faiss.IndexFlatIP(self._dimension)
        self._records.clear()

    def save(self, path: str) -> None:
        """Save FAISS index and records to disk."""
        p = Path(path)
        p.mkdir(parents=True, exist_ok=True)

        self._faiss.write_index(self._index, str(p / "index.faiss"))
        with open(p / "records.json", "w", encoding="utf-8") as f:
            json.dump({str(k): v for k, v in self._records.items()}, f)

        logger.info("FAISSStore saved to %s (%d records)", path, self.count())

    def load(self, path: str) -> None:
        """Load FAISS index and records from disk."""
        p = Path(path)

        self._index = self._faiss.read_index(str(p / "index.faiss"))
        with open(p / "records.json", encoding="utf-8") as f:
            data = json.load(f)
        self._records = {int(k): v for k, v in data.items()}

        logger.info("FAISSStore loaded from %s (%d records)", path, self.count())
