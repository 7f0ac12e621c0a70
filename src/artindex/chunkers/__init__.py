"""Chunking strategies for project documents."""

from artindex.chunkers.project_chunker import ChunkingStats, ProjectChunker, get_chunking_stats

__all__ = ["ProjectChunker", "ChunkingStats", "get_chunking_stats"]
