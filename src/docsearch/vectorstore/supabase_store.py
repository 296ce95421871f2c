"""Supabase (Postgres + pgvector) store, spoken to over the PostgREST API.

Similarity search runs inside Postgres through two SQL functions exposed as
RPC endpoints: ``match_documents`` (plain cosine similarity) and the
optional ``hybrid_match_documents`` (several embeddings per row). Both take
``query_embedding``, ``match_threshold`` and ``match_count`` and return
``content``, ``metadata``, ``similarity`` (plus ``match_type`` for hybrid).
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from docsearch.config import VectorStoreSettings
from docsearch.embeddings.validation import is_valid_embedding
from docsearch.vectorstore.base import HybridSearchUnavailable, VectorStore, VectorStoreError
from docsearch.vectorstore.schemas import (
    TEXT_MATCH_SIMILARITY,
    MetadataFilter,
    SearchResult,
    VectorRecord,
)

logger = logging.getLogger(__name__)

_NIL_UUID = "00000000-0000-0000-0000-000000000000"


def _quote(value: str) -> str:
    """Quote a value for use inside a PostgREST ``or=(...)`` expression."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _total_from_content_range(header: str | None) -> int:
    # "0-9/42" or "*/0"
    if not header or "/" not in header:
        return 0
    total = header.rsplit("/", 1)[1]
    return int(total) if total.isdigit() else 0


class SupabaseStore(VectorStore):
    """pgvector-backed store reached through Supabase's REST gateway."""

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        table: str = "document_embeddings",
        match_function: str = "match_documents",
        hybrid_function: str = "hybrid_match_documents",
        insert_batch_size: int = 50,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        url = url or os.getenv("SUPABASE_URL")
        api_key = api_key or os.getenv("SUPABASE_SERVICE_ROLE_KEY")
        if not url or not api_key:
            raise ValueError("SupabaseStore needs a project URL and a service role key")

        self.table = table
        self.match_function = match_function
        self.hybrid_function = hybrid_function
        self.insert_batch_size = insert_batch_size
        self._client = httpx.Client(
            base_url=f"{url.rstrip('/')}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: VectorStoreSettings, **kwargs) -> SupabaseStore:
        return cls(
            url=settings.url,
            api_key=settings.api_key,
            table=settings.table,
            match_function=settings.match_function,
            hybrid_function=settings.hybrid_function,
            insert_batch_size=settings.insert_batch_size,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add(self, records: list[VectorRecord]) -> int:
        if not records:
            return 0

        stored = 0
        total_batches = -(-len(records) // self.insert_batch_size)
        for start in range(0, len(records), self.insert_batch_size):
            batch_no = start // self.insert_batch_size + 1
            batch = records[start : start + self.insert_batch_size]

            rows = []
            for record in batch:
                if not is_valid_embedding(record.embedding):
                    logger.warning(
                        "Skipping record %s with invalid embedding (%s)",
                        record.id, type(record.embedding).__name__,
                    )
                    continue
                rows.append({
                    "content": record.content,
                    "metadata": record.metadata,
                    "embedding": record.embedding,
                })

            if not rows:
                logger.warning("Batch %d has no valid embeddings, skipping", batch_no)
                continue

            self._request(
                "POST", f"/{self.table}", json=rows, headers={"Prefer": "return=minimal"},
            )
            stored += len(rows)
            logger.info(
                "Stored batch %d/%d (%d items)", batch_no, total_batches, len(rows),
            )

        logger.info("SupabaseStore stored %d of %d records", stored, len(records))
        return stored

    def match(
        self,
        query_embedding: list[float],
        threshold: float,
        limit: int = 10,
        metadata_filter: MetadataFilter | None = None,
    ) -> list[SearchResult]:
        params = {}
        if metadata_filter:
            params = {
                f"metadata->>{key}": f"eq.{value}"
                for key, value in metadata_filter.to_dict().items()
            }

        resp = self._request(
            "POST",
            f"/rpc/{self.match_function}",
            json=self._rpc_payload(query_embedding, threshold, limit),
            params=params,
        )
        return [SearchResult.from_row(row, "vector") for row in resp.json() or []]

    def hybrid_match(
        self,
        query_embedding: list[float],
        threshold: float,
        limit: int = 10,
    ) -> list[SearchResult]:
        try:
            resp = self._client.post(
                f"/rpc/{self.hybrid_function}",
                json=self._rpc_payload(query_embedding, threshold, limit),
            )
        except httpx.HTTPError as exc:
            raise VectorStoreError(f"Hybrid search request failed: {exc}") from exc

        if resp.status_code == 404:
            raise HybridSearchUnavailable(
                f"RPC function '{self.hybrid_function}' is not deployed"
            )
        self._raise_for_status(resp)
        return [SearchResult.from_row(row, "hybrid") for row in resp.json() or []]

    def text_search(self, query: str, limit: int = 10) -> list[SearchResult]:
        pattern = _quote(f"*{query}*")
        resp = self._request(
            "GET",
            f"/{self.table}",
            params={
                "select": "content,metadata",
                "or": f"(content.ilike.{pattern},metadata->>headingPath.ilike.{pattern})",
                "limit": str(limit),
            },
        )
        return [
            SearchResult.from_row({**row, "similarity": TEXT_MATCH_SIMILARITY}, "text")
            for row in resp.json() or []
        ]

    def count_by_title(self, title: str) -> int:
        return self._count({"metadata->>title": f"eq.{title}"})

    def count(self) -> int:
        return self._count({})

    def clear(self) -> None:
        self._request("DELETE", f"/{self.table}", params={"id": f"neq.{_NIL_UUID}"})
        logger.info("Cleared all rows from %s", self.table)

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    @staticmethod
    def _rpc_payload(query_embedding: list[float], threshold: float, limit: int) -> dict:
        return {
            "query_embedding": query_embedding,
            "match_threshold": threshold,
            "match_count": limit,
        }

    def _count(self, params: dict[str, str]) -> int:
        resp = self._request(
            "GET",
            f"/{self.table}",
            params={"select": "id", "limit": "1", **params},
            headers={"Prefer": "count=exact"},
        )
        return _total_from_content_range(resp.headers.get("content-range"))

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Supabase %s %s failed: %s", method, path, exc)
            raise VectorStoreError(f"Supabase request failed: {exc}") from exc
        self._raise_for_status(resp)
        return resp

    @staticmethod
    def _raise_for_status(resp: httpx.Response) -> None:
        if resp.is_success:
            return
        logger.error("Supabase returned %d: %s", resp.status_code, resp.text[:500])
        raise VectorStoreError(
            f"Supabase returned {resp.status_code} for {resp.request.method} "
            f"{resp.request.url.path}: {resp.text[:200]}"
        )
