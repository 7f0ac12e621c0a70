"""Protocol definitions for extensible components."""

from artindex.protocols.chunker import ChunkingStrategy
from artindex.protocols.embedder import EmbeddingProvider, ProgressCallback
from artindex.protocols.source import DocumentSource

__all__ = ["DocumentSource", "EmbeddingProvider", "ChunkingStrategy", "ProgressCallback"]
