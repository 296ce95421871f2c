"""Ingestion pipeline — page → chunk → embed → validate → store.

This is the main entry point for adding documentation to the vector store.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from docsearch.chunking.markdown_chunker import MarkdownChunker
from docsearch.chunking.schemas import Chunk
from docsearch.config import Settings
from docsearch.documents.loader import DocumentLoader
from docsearch.embeddings.base import EmbeddingProvider
from docsearch.embeddings.validation import InvalidEmbeddingError, is_valid_embedding
from docsearch.pipeline.schemas import IngestResult
from docsearch.vectorstore.base import VectorStore
from docsearch.vectorstore.schemas import VectorRecord

logger = logging.getLogger(__name__)


class IngestPipeline:
    """Orchestrates page ingestion: chunk → embed → validate → store."""

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        vector_store: VectorStore,
        settings: Settings | None = None,
        loader: DocumentLoader | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.embedding_provider = embedding_provider
        self.vector_store = vector_store
        self.settings = settings or Settings()
        self.chunker = MarkdownChunker(self.settings.chunking)
        self.loader = loader or DocumentLoader(set(self.settings.ingestion.supported_formats))
        self._sleep = sleep

    def embed_document(
        self,
        text: str,
        base_url: str | None = None,
        skip_existing: bool | None = None,
        validate_embeddings: bool | None = None,
    ) -> IngestResult:
        """Chunk, embed and store one page.

        Args:
            text: Raw page text.
            base_url: Site origin prefixed to the page URL.
            skip_existing: Skip the page entirely if any chunk with the same
                title is already stored.
            validate_embeddings: Reject the whole page if any vector is
                malformed.

        Returns:
            An ``IngestResult`` with counts and warnings.

        Raises:
            InvalidEmbeddingError: Validation is on and a vector is malformed.
                Nothing is stored in that case.
        """
        ingestion = self.settings.ingestion
        base_url = ingestion.base_url if base_url is None else base_url
        skip_existing = ingestion.skip_existing if skip_existing is None else skip_existing
        if validate_embeddings is None:
            validate_embeddings = ingestion.validate_embeddings

        # Step 1: Chunk
        document = self.chunker.chunk(text, base_url)
        result = IngestResult(document_metadata=document.metadata)
        logger.info(
            "Page %r: %d chunks, %d top-level sections",
            document.metadata.title, len(document.chunks), len(document.heading_tree),
        )

        if document.is_empty:
            result.warnings.append("Page produced no chunks")
            return result

        # Step 2: Skip pages that are already stored
        if skip_existing:
            existing = self.vector_store.count_by_title(document.metadata.title)
            if existing > 0:
                logger.info(
                    "Page %r already has %d stored chunks, skipping",
                    document.metadata.title, existing,
                )
                result.skipped = existing
                return result

        # Step 3: Embed in batches
        records, tokens = self._embed_chunks(document.chunks)

        # Step 4: Validate
        if validate_embeddings:
            invalid = [r for r in records if not is_valid_embedding(r.embedding)]
            if invalid:
                raise InvalidEmbeddingError(f"Generated {len(invalid)} invalid embeddings")

        # Step 5: Store
        stored = self.vector_store.add(records)

        result.chunks_processed = len(document.chunks)
        result.embeddings_generated = len(records)
        result.chunks_stored = stored
        result.tokens_used = tokens

        logger.info(
            "Ingested %r: %d chunks → %d embedded → %d stored (%d tokens)",
            document.metadata.title, len(document.chunks), len(records), stored, tokens,
        )
        return result

    def ingest_file(self, path: str | Path, **kwargs) -> IngestResult:
        """Load a page from disk and embed it."""
        loaded = self.loader.load_file(path)
        result = self.embed_document(loaded.text, **kwargs)
        result.source = loaded.source_path
        result.warnings = loaded.warnings + result.warnings
        return result

    def ingest_directory(self, path: str | Path, **kwargs) -> list[IngestResult]:
        """Embed every supported page under ``path``."""
        results = []
        for loaded in self.loader.load_directory(path):
            result = self.embed_document(loaded.text, **kwargs)
            result.source = loaded.source_path
            result.warnings = loaded.warnings + result.warnings
            results.append(result)
        return results

    def _embed_chunks(self, chunks: list[Chunk]) -> tuple[list[VectorRecord], int]:
        batch_size = self.settings.embedding.batch_size
        model = self.embedding_provider.model
        n_batches = -(-len(chunks) // batch_size)

        records: list[VectorRecord] = []
        total_tokens = 0
        for i in range(0, len(chunks), batch_size):
            batch = chunks[i : i + batch_size]
            logger.info("Processing batch %d/%d", i // batch_size + 1, n_batches)

            embedded = self.embedding_provider.embed_many([c.contextual_content for c in batch])
            total_tokens += embedded.total_tokens

            processed_at = datetime.now(UTC).isoformat()
            for chunk, vector in zip(batch, embedded.vectors, strict=True):
                metadata = chunk.metadata.to_dict()
                metadata["originalContent"] = chunk.content
                metadata["embedding_model"] = model
                metadata["processed_at"] = processed_at
                records.append(VectorRecord(
                    id=str(uuid.uuid4()),
                    content=chunk.contextual_content,
                    embedding=vector,
                    metadata=metadata,
                ))

            # Rate limit between batches
            if i + batch_size < len(chunks):
                self._sleep(self.settings.embedding.batch_delay)

        return records, total_tokens
