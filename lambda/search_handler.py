"""Lambda handler for documentation search — triggered by API Gateway.

Thin wrapper around AgentSearch. All business logic lives in src/docsearch/.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from docsearch.config import load_settings
from docsearch.embeddings.factory import provider_from_settings
from docsearch.pipeline.agent import AgentSearch
from docsearch.retrieval.retriever import Retriever
from docsearch.vectorstore.factory import store_from_settings

logger = logging.getLogger(__name__)
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))

# Initialize outside handler for Lambda warm-start reuse
_search: AgentSearch | None = None


def _get_search() -> AgentSearch:
    global _search
    if _search is not None:
        return _search

    settings = load_settings()
    retriever = Retriever(
        embedding_provider=provider_from_settings(settings.embedding),
        vector_store=store_from_settings(settings),
        settings=settings.search,
    )
    _search = AgentSearch(retriever)
    return _search


def _response(status: int, payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(payload),
    }


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle API Gateway request — parse query, search, return JSON."""
    try:
        body = json.loads(event.get("body") or "{}")
    except (json.JSONDecodeError, TypeError):
        return _response(400, {"error": "Request body must be JSON"})

    query = body.get("query", "") if isinstance(body, dict) else ""
    if not query:
        return _response(400, {"error": "Missing 'query' field"})

    response = _get_search().search_for_agent(
        query,
        limit=body.get("limit"),
        threshold=body.get("threshold"),
        document_filter=body.get("document"),
    )
    return _response(200, response.to_dict())
