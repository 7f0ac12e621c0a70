"""Protocol for corpus document sources."""

from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from artindex.models import Document


@runtime_checkable
class DocumentSource(Protocol):
    """Protocol for loaders that produce the ordered document corpus.

    Uses structural subtyping - no inheritance required.
    """

    @property
    def source_type(self) -> str:
        """Return identifier for this source type (e.g., 'json')."""
        ...

    def can_handle(self, source: Path) -> bool:
        """Check if this loader can read the given source."""
        ...

    def load(self, source: Path, limit: Optional[int] = None) -> list[Document]:
        """Load documents in corpus order, truncated to `limit` when given."""
        ...
