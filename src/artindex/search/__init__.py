"""Semantic search over the embedding index."""

from artindex.search.engine import (
    IndexHandle,
    SearchEngine,
    apply_filters,
    cosine_similarity,
)
from artindex.search.enrich import ProjectCatalog

__all__ = [
    "IndexHandle",
    "SearchEngine",
    "ProjectCatalog",
    "apply_filters",
    "cosine_similarity",
]
