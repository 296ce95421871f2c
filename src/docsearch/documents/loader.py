"""Document source — reads exported markdown pages from disk or memory."""

from __future__ import annotations

import logging
from pathlib import Path

from docsearch.documents.schemas import LoadResult

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".md", ".mdx", ".txt"}


class DocumentLoader:
    """Load documentation pages into ``LoadResult`` objects."""

    def __init__(self, extensions: set[str] | None = None):
        self.extensions = {e.lower() for e in (extensions or SUPPORTED_EXTENSIONS)}

    def load_file(self, path: str | Path) -> LoadResult:
        """Load a page from a filesystem path."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        ext = path.suffix.lower()
        if ext not in self.extensions:
            raise ValueError(
                f"Unsupported format '{ext}'. Supported: {sorted(self.extensions)}"
            )

        result = self._decode(path.read_bytes())
        result.format = ext.lstrip(".")
        result.source_path = str(path)
        return result

    def load_bytes(self, data: bytes, filename: str) -> LoadResult:
        """Load a page from in-memory bytes (uploads, S3 objects)."""
        ext = Path(filename).suffix.lower()
        if ext not in self.extensions:
            raise ValueError(
                f"Unsupported format '{ext}'. Supported: {sorted(self.extensions)}"
            )

        result = self._decode(data)
        result.format = ext.lstrip(".")
        result.source_path = filename
        return result

    def load_directory(self, path: str | Path) -> list[LoadResult]:
        """Load every supported page under ``path``, sorted by relative path."""
        root = Path(path)
        if not root.is_dir():
            raise FileNotFoundError(f"Directory not found: {root}")

        results = [
            self.load_file(p)
            for p in sorted(root.rglob("*"))
            if p.is_file() and p.suffix.lower() in self.extensions
        ]
        logger.info("Loaded %d pages from %s", len(results), root)
        return results

    @staticmethod
    def _decode(data: bytes) -> LoadResult:
        try:
            text = data.decode("utf-8")
            return LoadResult(text=text, char_count=len(text))
        except UnicodeDecodeError:
            text = data.decode("utf-8", errors="replace")
            return LoadResult(
                text=text,
                char_count=len(text),
                warnings=["Page is not valid utf-8; undecodable bytes were replaced"],
            )
