"""Index generation pipeline."""

from artindex.pipeline.builder import BuildMode, BuildSummary, IndexBuilder, merge_vectors
from artindex.pipeline.changes import ChangeSet, compute_checksum, get_changed_projects

__all__ = [
    "IndexBuilder",
    "BuildMode",
    "BuildSummary",
    "merge_vectors",
    "ChangeSet",
    "compute_checksum",
    "get_changed_projects",
]
