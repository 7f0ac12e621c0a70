"""Utility functions for ArtIndex."""

from artindex.utils.formatting import format_duration, format_size

__all__ = ["format_duration", "format_size"]
