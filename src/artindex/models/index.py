"""Data models for the persisted vector index."""

from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np

from artindex.models.document import ChunkType


@dataclass
class Vector:
    """An embedded chunk. `embedding` is L2-normalized float32."""

    id: str
    project_id: str
    type: ChunkType
    embedding: np.ndarray
    source: str
    artist: str
    script_type: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "projectId": self.project_id,
            "type": self.type.value,
            "embedding": [float(x) for x in self.embedding],
            "source": self.source,
            "artist": self.artist,
            "scriptType": self.script_type,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Vector":
        return cls(
            id=data["id"],
            project_id=str(data["projectId"]),
            type=ChunkType(data.get("type", ChunkType.METADATA.value)),
            embedding=np.asarray(data["embedding"], dtype=np.float32),
            source=data.get("source") or "unknown",
            artist=data.get("artist") or "Unknown Artist",
            script_type=data.get("scriptType") or "unknown",
        )


@dataclass
class IndexMetadata:
    """Descriptive record stored next to the vectors."""

    model: str
    dimensions: int
    created: str
    project_count: int
    chunk_count: int
    version: str
    checkpoint: bool = False
    processed_chunks: Optional[int] = None
    last_checkpoint: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "model": self.model,
            "dimensions": self.dimensions,
            "created": self.created,
            "projectCount": self.project_count,
            "chunkCount": self.chunk_count,
            "version": self.version,
        }
        if self.checkpoint:
            data["checkpoint"] = True
            data["processedChunks"] = self.processed_chunks
            data["lastCheckpoint"] = self.last_checkpoint
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IndexMetadata":
        return cls(
            model=data["model"],
            dimensions=int(data["dimensions"]),
            created=data.get("created", ""),
            project_count=int(data.get("projectCount", 0)),
            chunk_count=int(data.get("chunkCount", 0)),
            version=data.get("version", ""),
            checkpoint=bool(data.get("checkpoint", False)),
            processed_chunks=data.get("processedChunks"),
            last_checkpoint=data.get("lastCheckpoint"),
        )


@dataclass
class Index:
    """The vector collection together with its metadata."""

    vectors: list[Vector] = field(default_factory=list)
    metadata: Optional[IndexMetadata] = None

    @property
    def is_complete(self) -> bool:
        return self.metadata is not None and not self.metadata.checkpoint

    def project_ids(self) -> set[str]:
        return {v.project_id for v in self.vectors}
