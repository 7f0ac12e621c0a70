"""Exception types raised by ArtIndex components."""


class ArtIndexError(Exception):
    """Base class for all ArtIndex errors."""

    hint: str = ""


class CorpusError(ArtIndexError):
    """The source document corpus is missing or cannot be parsed."""

    hint = "Run the dataset processing step first to produce rag-documents.json"


class EmbeddingModelError(ArtIndexError):
    """The embedding model could not be initialized."""


class IndexNotAvailableError(ArtIndexError):
    """Search was requested but no persisted index exists."""

    hint = "Generate the index first: run `artindex generate`"


class DimensionMismatchError(ArtIndexError):
    """A vector does not match the dimension of the index it belongs to."""
