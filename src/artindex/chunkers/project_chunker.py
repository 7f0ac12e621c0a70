"""Metadata/tags chunking strategy for project documents."""

from dataclasses import dataclass
from typing import Iterable

from artindex.models import Chunk, ChunkType, Document


class ProjectChunker:
    """Default chunking: one metadata chunk, plus a tags chunk when worthwhile.

    - The metadata chunk carries the document content, cut to MAX_CONTENT_CHARS
      (~400 words) so it fits the embedding model's context window
    - The tags chunk joins aesthetics and patterns and is only emitted when
      the joined text is longer than MIN_TAG_CHARS
    """

    MAX_CONTENT_CHARS = 1500
    MIN_TAG_CHARS = 30

    def chunk(self, document: Document) -> list[Chunk]:
        """Split a project document into chunks.

        Args:
            document: The project document to chunk

        Returns:
            [metadata] or [metadata, tags]
        """
        meta = document.metadata

        if document.content:
            content = document.content[: self.MAX_CONTENT_CHARS]
        else:
            project_ref = meta.project_id if meta.project_id is not None else document.id
            content = f"Project {project_ref} by {meta.artist}"

        chunks = [self._make_chunk(document, ChunkType.METADATA, content)]

        tag_text = self.tag_text(document)
        if len(tag_text) > self.MIN_TAG_CHARS:
            chunks.append(self._make_chunk(document, ChunkType.TAGS, tag_text))

        return chunks

    def chunk_many(self, documents: Iterable[Document]) -> list[Chunk]:
        """Chunk documents in input order and flatten the result."""
        chunks: list[Chunk] = []
        for document in documents:
            chunks.extend(self.chunk(document))
        return chunks

    @staticmethod
    def tag_text(document: Document) -> str:
        """Return "Aesthetics: ... . Patterns: ..." or "" when there are no tags."""
        parts = []
        if document.metadata.aesthetics:
            parts.append(f"Aesthetics: {', '.join(document.metadata.aesthetics)}")
        if document.metadata.patterns:
            parts.append(f"Patterns: {', '.join(document.metadata.patterns)}")
        return ". ".join(parts)

    @staticmethod
    def _make_chunk(document: Document, chunk_type: ChunkType, content: str) -> Chunk:
        meta = document.metadata
        return Chunk(
            id=f"{document.id}_{chunk_type.value}",
            type=chunk_type,
            content=content,
            project_id=document.id,
            source=meta.source,
            artist=meta.artist,
            script_type=meta.script_type,
        )


@dataclass(frozen=True)
class ChunkingStats:
    total_projects: int
    total_chunks: int
    metadata_chunks: int
    tag_chunks: int

    @property
    def avg_chunks_per_project(self) -> float:
        if self.total_projects == 0:
            return 0.0
        return self.total_chunks / self.total_projects


def get_chunking_stats(chunks: list[Chunk], project_count: int) -> ChunkingStats:
    """Summarize an already chunked corpus."""
    metadata_chunks = sum(1 for c in chunks if c.type is ChunkType.METADATA)
    return ChunkingStats(
        total_projects=project_count,
        total_chunks=len(chunks),
        metadata_chunks=metadata_chunks,
        tag_chunks=len(chunks) - metadata_chunks,
    )
