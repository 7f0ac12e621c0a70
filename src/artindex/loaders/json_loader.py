"""Loader for the JSON document corpus (rag-documents.json)."""

import json
import logging
from pathlib import Path
from typing import Optional

from artindex.errors import CorpusError
from artindex.models import Document

logger = logging.getLogger(__name__)


class JsonCorpusLoader:
    """Loads a JSON array of {id, content, metadata} records."""

    source_type = "json"

    def can_handle(self, source: Path) -> bool:
        """Check if this is a JSON file."""
        return source.suffix.lower() == ".json"

    def load(self, source: Path, limit: Optional[int] = None) -> list[Document]:
        """Read and validate the corpus.

        Args:
            source: Path to the corpus file
            limit: Keep only the first `limit` documents

        Returns:
            Documents in corpus order

        Raises:
            CorpusError: if the file is missing, unreadable or not a JSON array
        """
        try:
            raw = json.loads(source.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise CorpusError(f"Document corpus not found: {source}") from e
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorpusError(f"Error loading document corpus {source}: {e}") from e

        if not isinstance(raw, list):
            raise CorpusError(f"Document corpus {source} must be a JSON array")

        if limit is not None:
            raw = raw[:limit]

        documents = []
        seen: set[str] = set()
        for position, record in enumerate(raw):
            if not isinstance(record, dict):
                logger.warning(f"Skipping corpus record {position}: not an object")
                continue
            try:
                doc = Document.from_dict(record)
            except ValueError as e:
                logger.warning(f"Skipping corpus record {position}: {e}")
                continue
            if doc.id in seen:
                logger.warning(f"Skipping duplicate document id: {doc.id}")
                continue
            seen.add(doc.id)
            documents.append(doc)

        return documents
