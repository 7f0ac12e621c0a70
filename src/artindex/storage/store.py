"""JSON-file storage for the vector index and document checksums."""

import json
import logging
import os
import tempfile
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any, Iterator, Optional

from artindex.errors import DimensionMismatchError
from artindex.models import Index, IndexMetadata, Vector
from artindex.storage.schema import (
    CHECKSUMS_FILE,
    FORMAT_VERSION,
    METADATA_FILE,
    METADATA_KEYS,
    VECTOR_KEYS,
    VECTORS_FILE,
)

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class VectorStore:
    """Persists the index as vectors.json + metadata.json, plus checksums.json.

    Each file is written to a temporary sibling and renamed into place, so a
    reader sees either the previous or the new version of a file, never a
    partial one. Vectors are always written before metadata.
    """

    def __init__(self, index_dir: Path | str):
        self.index_dir = Path(index_dir)

    @property
    def vectors_path(self) -> Path:
        return self.index_dir / VECTORS_FILE

    @property
    def metadata_path(self) -> Path:
        return self.index_dir / METADATA_FILE

    @property
    def checksums_path(self) -> Path:
        return self.index_dir / CHECKSUMS_FILE

    def ensure_dir(self) -> None:
        """Create the index directory if it does not exist."""
        if not self.index_dir.exists():
            self.index_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created directory: {self.index_dir}")

    @contextmanager
    def _atomic_write(self, path: Path) -> Iterator[IO[str]]:
        """Context manager yielding a temp file that replaces `path` on success."""
        self.ensure_dir()
        fd, tmp_name = tempfile.mkstemp(
            dir=self.index_dir, prefix=f".{path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yield f
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _write_json(self, path: Path, data: Any, indent: Optional[int] = None) -> None:
        with self._atomic_write(path) as f:
            json.dump(data, f, indent=indent)

    def _read_json(self, path: Path) -> Any:
        with path.open(encoding="utf-8") as f:
            return json.load(f)

    # Index persistence

    def save_index(self, index: Index) -> None:
        """Persist a complete index, replacing any previous one."""
        if index.metadata is None:
            raise ValueError("Cannot save an index without metadata")
        self._check_dimensions(index.vectors, index.metadata.dimensions)

        self._write_json(self.vectors_path, [v.to_dict() for v in index.vectors])
        logger.info(f"Saved {len(index.vectors)} vectors to {self.vectors_path}")

        self._write_json(self.metadata_path, index.metadata.to_dict(), indent=2)
        logger.info(f"Saved metadata to {self.metadata_path}")

    def save_checkpoint(
        self, vectors: list[Vector], metadata: IndexMetadata, processed: int
    ) -> None:
        """Persist a partial index marked as an incomplete checkpoint."""
        checkpoint_meta = replace(
            metadata,
            checkpoint=True,
            processed_chunks=processed,
            last_checkpoint=_now_iso(),
        )
        self._check_dimensions(vectors, metadata.dimensions)
        self._write_json(self.vectors_path, [v.to_dict() for v in vectors])
        self._write_json(self.metadata_path, checkpoint_meta.to_dict(), indent=2)
        logger.info(f"Checkpoint saved: {processed} chunks processed")

    def load_index(self) -> Optional[Index]:
        """Load the index from disk.

        Returns:
            The index, or None if either file is missing or malformed
        """
        if not self.index_exists():
            return None

        try:
            raw_vectors = self._read_json(self.vectors_path)
            metadata = self._parse_metadata(self._read_json(self.metadata_path))
            if not isinstance(raw_vectors, list):
                raise ValueError("vectors file is not a JSON array")
            vectors = [self._parse_vector(item) for item in raw_vectors]
            self._check_dimensions(vectors, metadata.dimensions)
        except (OSError, ValueError, KeyError, TypeError, DimensionMismatchError) as e:
            logger.warning(f"Error loading index: {e}")
            return None

        index = Index(vectors=vectors, metadata=metadata)
        if not self.is_consistent(index):
            logger.warning(
                f"Index metadata reports {self._expected_count(metadata)} vectors "
                f"but {len(vectors)} were loaded"
            )
        return index

    def index_exists(self) -> bool:
        """True iff both the vectors and metadata files exist."""
        return self.vectors_path.exists() and self.metadata_path.exists()

    def get_metadata(self) -> Optional[IndexMetadata]:
        """Load only the index metadata, without the vectors."""
        if not self.metadata_path.exists():
            return None

        try:
            return self._parse_metadata(self._read_json(self.metadata_path))
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Error loading metadata: {e}")
            return None

    @staticmethod
    def create_metadata(
        project_count: int, chunk_count: int, *, model: str, dimensions: int
    ) -> IndexMetadata:
        """Create a metadata record stamped with the current time."""
        return IndexMetadata(
            model=model,
            dimensions=dimensions,
            created=_now_iso(),
            project_count=project_count,
            chunk_count=chunk_count,
            version=FORMAT_VERSION,
        )

    def is_consistent(self, index: Index) -> bool:
        """Cross-check the metadata vector count against the loaded vectors."""
        if index.metadata is None:
            return False
        return self._expected_count(index.metadata) == len(index.vectors)

    # Checksums

    def load_checksums(self) -> dict[str, str]:
        """Load the project id -> content hash map ({} when absent or malformed)."""
        if not self.checksums_path.exists():
            return {}

        try:
            data = self._read_json(self.checksums_path)
        except (OSError, ValueError) as e:
            logger.warning(f"Error loading checksums: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring checksums file: not a JSON object")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def save_checksums(self, checksums: dict[str, str]) -> None:
        """Replace the persisted checksum map."""
        self._write_json(self.checksums_path, dict(sorted(checksums.items())), indent=2)
        logger.debug(f"Saved {len(checksums)} checksums to {self.checksums_path}")

    # Helpers

    @staticmethod
    def _expected_count(metadata: IndexMetadata) -> int:
        return metadata.chunk_count

    @staticmethod
    def _check_dimensions(vectors: list[Vector], dimensions: int) -> None:
        for vector in vectors:
            if len(vector.embedding) != dimensions:
                raise DimensionMismatchError(
                    f"Vector {vector.id} has {len(vector.embedding)} dimensions, "
                    f"index expects {dimensions}"
                )

    @staticmethod
    def _parse_metadata(data: Any) -> IndexMetadata:
        if not isinstance(data, dict):
            raise ValueError("metadata file is not a JSON object")
        missing = [k for k in METADATA_KEYS if k not in data]
        if missing:
            raise KeyError(f"metadata missing keys: {', '.join(missing)}")
        return IndexMetadata.from_dict(data)

    @staticmethod
    def _parse_vector(data: Any) -> Vector:
        if not isinstance(data, dict):
            raise ValueError("vector record is not a JSON object")
        missing = [k for k in VECTOR_KEYS if k not in data]
        if missing:
            raise KeyError(f"vector record missing keys: {', '.join(missing)}")
        return Vector.from_dict(data)
