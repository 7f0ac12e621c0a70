"""Protocol for embedding model providers."""

from typing import Callable, Optional, Protocol, runtime_checkable

import numpy as np

ProgressCallback = Callable[[int, int], None]


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Protocol for embedding model providers.

    Allows swapping between local models (sentence-transformers),
    API-based models, or test doubles. Every returned vector must be
    L2-normalized and of length `dimension`.
    """

    @property
    def dimension(self) -> int:
        """Return the embedding dimension."""
        ...

    @property
    def model_name(self) -> str:
        """Return identifier for the model used."""
        ...

    def embed(self, text: str) -> np.ndarray:
        """Embed a single text. Returns array of shape (dimension,)."""
        ...

    def embed_batch(
        self,
        texts: list[str],
        batch_size: int = 50,
        on_progress: Optional[ProgressCallback] = None,
    ) -> np.ndarray:
        """Embed texts in batches, calling on_progress(processed, total) after each.

        Returns: numpy array of shape (len(texts), dimension)
        """
        ...
