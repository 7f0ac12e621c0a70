"""ArtIndex - semantic search over generative art projects."""

__version__ = "1.0.0"
