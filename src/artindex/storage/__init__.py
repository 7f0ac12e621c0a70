"""Persistence for the vector index."""

from artindex.storage.store import VectorStore

__all__ = ["VectorStore"]
