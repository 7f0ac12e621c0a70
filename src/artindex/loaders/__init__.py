"""Corpus loaders for ArtIndex."""

from pathlib import Path
from typing import Optional

from artindex.loaders.json_loader import JsonCorpusLoader
from artindex.protocols import DocumentSource

# Registry of available loaders
_LOADERS: list[DocumentSource] = [
    JsonCorpusLoader(),
]


def get_loader(source: Path | str) -> Optional[DocumentSource]:
    """Find a loader that can read the given corpus.

    Args:
        source: Path to the corpus file

    Returns:
        A DocumentSource instance that can handle the source, or None
    """
    source_path = Path(source)
    for loader in _LOADERS:
        if loader.can_handle(source_path):
            return loader
    return None


def register_loader(loader: DocumentSource) -> None:
    """Register a custom corpus loader.

    Args:
        loader: An object implementing the DocumentSource protocol
    """
    _LOADERS.append(loader)


__all__ = ["get_loader", "register_loader", "JsonCorpusLoader"]
