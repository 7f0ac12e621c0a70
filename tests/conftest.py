"""
Shared test fixtures.

Provides: a deterministic embedding provider, document factories, a temp-dir VectorStore
"""

import hashlib
from typing import Optional

import numpy as np
import pytest

from artindex.models import Document
from artindex.storage import VectorStore


class FakeEmbedder:
    """Deterministic stand-in for the sentence-transformers model.

    Texts map to hash-seeded unit vectors unless an explicit vector is
    registered in `vectors`. Records every text embedded through embed_batch.
    """

    def __init__(
        self,
        dimension: int = 8,
        model_name: str = "fake-model",
        vectors: Optional[dict] = None,
        salt: str = "",
        fail_after_batches: Optional[int] = None,
    ):
        self._dimension = dimension
        self._model_name = model_name
        self.vectors = vectors or {}
        self.salt = salt
        self.fail_after_batches = fail_after_batches
        self.embedded_texts: list[str] = []
        self.batch_calls = 0
        self.queries: list[str] = []

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def model_name(self) -> str:
        return self._model_name

    def vector_for(self, text: str) -> np.ndarray:
        if text in self.vectors:
            v = np.asarray(self.vectors[text], dtype=np.float64)
        else:
            seed = int(hashlib.sha256((self.salt + text).encode()).hexdigest()[:8], 16)
            v = np.random.default_rng(seed).normal(size=self._dimension)
        return (v / np.linalg.norm(v)).astype(np.float32)

    def embed(self, text: str) -> np.ndarray:
        self.queries.append(text)
        return self.vector_for(text)

    def embed_batch(self, texts, batch_size=50, on_progress=None) -> np.ndarray:
        if self.fail_after_batches is not None and self.batch_calls >= self.fail_after_batches:
            raise RuntimeError("embedding model crashed")
        self.batch_calls += 1
        self.embedded_texts.extend(texts)
        if on_progress is not None:
            on_progress(len(texts), len(texts))
        return np.vstack([self.vector_for(t) for t in texts])


def unit(*components: float, dimension: int = 8) -> np.ndarray:
    """Build a vector from leading components, zero-padded to `dimension`."""
    v = np.zeros(dimension, dtype=np.float32)
    v[: len(components)] = components
    return v


def build_document(doc_id: str, content: Optional[str] = "Some project", **metadata) -> Document:
    return Document.from_dict({"id": doc_id, "content": content, "metadata": metadata})


@pytest.fixture
def make_doc():
    """Factory for Document objects: make_doc(id, content, **metadata)."""
    return build_document


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def fake_embedder_cls():
    return FakeEmbedder


@pytest.fixture
def unit_vector():
    return unit


@pytest.fixture
def store(tmp_path):
    return VectorStore(tmp_path / "embeddings")
