"""SentenceTransformer-based embedding provider."""

import logging
from pathlib import Path
from typing import Optional

import numpy as np
from sentence_transformers import SentenceTransformer

from artindex.errors import EmbeddingModelError
from artindex.protocols.embedder import ProgressCallback

logger = logging.getLogger(__name__)


class SentenceTransformerEmbedder:
    """Embedding provider using sentence-transformers library.

    Uses bge-small-en-v1.5 by default - a small, MIT-licensed model that
    produces 384-dimensional embeddings. The model is loaded on first use
    and reused for the lifetime of this object, so one instance acts as the
    model handle that generation and search share.
    """

    DEFAULT_MODEL = "BAAI/bge-small-en-v1.5"
    DEFAULT_BATCH_SIZE = 50

    def __init__(self, model_name: str | None = None, cache_dir: Path | str | None = None):
        """Initialize the embedder.

        Args:
            model_name: Name of the sentence-transformers model to use.
                       Defaults to bge-small-en-v1.5.
            cache_dir: Directory where downloaded model files are kept.
        """
        self._model_name = model_name or self.DEFAULT_MODEL
        self._cache_dir = str(cache_dir) if cache_dir else None
        self._model: SentenceTransformer | None = None

    @property
    def model(self) -> SentenceTransformer:
        """Lazy-load the model on first access."""
        if self._model is None:
            logger.info(f"Loading embedding model: {self._model_name}")
            try:
                self._model = SentenceTransformer(
                    self._model_name, cache_folder=self._cache_dir
                )
            except Exception as e:
                raise EmbeddingModelError(
                    f"Failed to load embedding model {self._model_name}: {e}"
                ) from e
            logger.info("Model loaded.")
        return self._model

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    def load(self) -> None:
        """Acquire the model now instead of on the first embed call."""
        _ = self.model

    @property
    def dimension(self) -> int:
        """Return the embedding dimension."""
        return self.model.get_sentence_embedding_dimension()

    @property
    def model_name(self) -> str:
        """Return identifier for the model used."""
        return self._model_name

    def embed(self, text: str) -> np.ndarray:
        """Generate a normalized embedding for one text."""
        return self._encode([text])[0]

    def embed_batch(
        self,
        texts: list[str],
        batch_size: int = DEFAULT_BATCH_SIZE,
        on_progress: Optional[ProgressCallback] = None,
    ) -> np.ndarray:
        """Generate embeddings for texts, one model call per batch.

        Args:
            texts: List of text strings to embed
            batch_size: Number of texts per model call
            on_progress: Called with (processed, total) after each batch

        Returns:
            numpy array of shape (len(texts), embedding_dim)
        """
        if not texts:
            return np.empty((0, self.dimension), dtype=np.float32)

        batches = []
        total = len(texts)
        for start in range(0, total, batch_size):
            batches.append(self._encode(texts[start : start + batch_size]))
            processed = min(start + batch_size, total)
            if on_progress is not None:
                on_progress(processed, total)
            else:
                logger.debug(f"Embedded {processed}/{total}")

        return np.vstack(batches)

    def _encode(self, texts: list[str]) -> np.ndarray:
        embeddings = self.model.encode(
            texts,
            batch_size=len(texts),
            convert_to_numpy=True,
            normalize_embeddings=True,  # For cosine similarity
            show_progress_bar=False,
        )
        return embeddings.astype(np.float32, copy=False)
