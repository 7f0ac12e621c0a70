"""Data models for ArtIndex."""

from artindex.models.document import Chunk, ChunkType, Document, ProjectMetadata
from artindex.models.events import ProgressEvent
from artindex.models.index import Index, IndexMetadata, Vector
from artindex.models.search import SearchFilters, SearchResult

__all__ = [
    "Document",
    "ProjectMetadata",
    "Chunk",
    "ChunkType",
    "Vector",
    "Index",
    "IndexMetadata",
    "ProgressEvent",
    "SearchFilters",
    "SearchResult",
]
