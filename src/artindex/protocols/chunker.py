"""Protocol for document chunking strategies."""

from typing import Protocol, runtime_checkable

from artindex.models import Chunk, Document


@runtime_checkable
class ChunkingStrategy(Protocol):
    """Protocol for document chunking strategies.

    Implementations must be pure: the same document always yields the same chunks.
    """

    def chunk(self, document: Document) -> list[Chunk]:
        """Split a document into embeddable chunks."""
        ...
