"""Lambda handler for page ingestion — invoked with page contents.

Thin wrapper around IngestPipeline. All business logic lives in src/docsearch/.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from docsearch.config import load_settings
from docsearch.embeddings.factory import provider_from_settings
from docsearch.pipeline.ingest import IngestPipeline
from docsearch.vectorstore.factory import store_from_settings

logger = logging.getLogger(__name__)
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Embed each ``{"content", "base_url"?}`` document in the event."""
    if isinstance(event.get("body"), str):
        try:
            event = json.loads(event["body"])
        except json.JSONDecodeError:
            return {"statusCode": 400, "error": "Request body must be JSON"}

    documents = event.get("documents") or []
    if not documents:
        return {"statusCode": 400, "error": "Missing 'documents' field"}

    settings = load_settings()
    pipeline = IngestPipeline(
        embedding_provider=provider_from_settings(settings.embedding),
        vector_store=store_from_settings(settings),
        settings=settings,
    )

    results = []
    for doc in documents:
        result = pipeline.embed_document(
            doc.get("content", ""),
            base_url=doc.get("base_url"),
            skip_existing=doc.get("skip_existing"),
        )
        results.append(result.to_dict())

    logger.info("Ingested %d documents", len(results))
    return {"statusCode": 200, "results": results}
