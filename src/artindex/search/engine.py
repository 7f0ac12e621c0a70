"""Exact nearest-neighbour search over the persisted index."""

import logging
import time
from typing import Any, Optional, Union

import numpy as np

from artindex.errors import DimensionMismatchError, IndexNotAvailableError
from artindex.models import Index, SearchFilters, SearchResult, Vector
from artindex.protocols import EmbeddingProvider
from artindex.storage import VectorStore

logger = logging.getLogger(__name__)

FiltersLike = Union[SearchFilters, dict[str, Any], None]


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Cosine similarity of two L2-normalized vectors, i.e. their dot product."""
    return float(np.dot(a, b))


def _matches(vector: Vector, filters: SearchFilters) -> bool:
    if filters.platform and (vector.source or "").lower() != filters.platform.lower():
        return False
    if filters.framework and (vector.script_type or "").lower() != filters.framework.lower():
        return False
    if filters.artist and filters.artist.lower() not in (vector.artist or "").lower():
        return False
    return True


def apply_filters(vectors: list[Vector], filters: SearchFilters) -> list[Vector]:
    """Keep vectors matching every supplied metadata filter."""
    return [v for v in vectors if _matches(v, filters)]


class IndexHandle:
    """Lazily loaded, cached view of the persisted index.

    The first call to `get()` reads the index from the store; later calls
    reuse it until `clear()` is called.
    """

    def __init__(self, store: VectorStore):
        self.store = store
        self._index: Optional[Index] = None
        self._matrix: Optional[np.ndarray] = None

    @property
    def is_loaded(self) -> bool:
        return self._index is not None

    def exists(self) -> bool:
        return self.store.index_exists()

    def get(self) -> Index:
        """Return the cached index, loading it on first use.

        Raises:
            IndexNotAvailableError: if no readable index is persisted
        """
        if self._index is not None:
            return self._index

        if not self.store.index_exists():
            raise IndexNotAvailableError(
                "Embeddings not found. Run `artindex generate` first."
            )

        logger.info("Loading embedding index...")
        start = time.perf_counter()
        index = self.store.load_index()
        if index is None:
            raise IndexNotAvailableError(
                "Embedding index could not be read. Run `artindex generate --force`."
            )
        if index.metadata is not None and index.metadata.checkpoint:
            logger.warning("Loaded index is an incomplete checkpoint")

        self._index = index
        if index.vectors:
            self._matrix = np.vstack([v.embedding for v in index.vectors]).astype(np.float32)
        else:
            dims = index.metadata.dimensions if index.metadata else 0
            self._matrix = np.empty((0, dims), dtype=np.float32)
        logger.info(
            f"Loaded {len(index.vectors):,} vectors in {time.perf_counter() - start:.2f}s"
        )
        return index

    @property
    def matrix(self) -> np.ndarray:
        """Embeddings of all vectors stacked in index order."""
        self.get()
        return self._matrix

    def clear(self) -> None:
        """Drop the cached index so the next access reloads it."""
        self._index = None
        self._matrix = None


class SearchEngine:
    """Filters, scores, ranks and deduplicates index vectors for a query."""

    DEFAULT_TOP_K = 10
    DEFAULT_MIN_SCORE = 0.3

    def __init__(
        self,
        index: IndexHandle,
        embedder: EmbeddingProvider,
        min_score: Optional[float] = None,
    ):
        self.index = index
        self.embedder = embedder
        self.min_score = self.DEFAULT_MIN_SCORE if min_score is None else min_score

    def search(
        self,
        query: str,
        top_k: int = DEFAULT_TOP_K,
        filters: FiltersLike = None,
        include_scores: bool = True,
    ) -> list[SearchResult]:
        """Find the projects most similar to a natural-language query.

        Args:
            query: Natural language query
            top_k: Maximum number of distinct projects to return
            filters: platform / framework / artist / min_score criteria
            include_scores: Attach the similarity score to each result

        Returns:
            At most top_k results, one per project, best first. Empty when
            nothing reaches the minimum score.

        Raises:
            IndexNotAvailableError: if no index has been generated
        """
        if not isinstance(filters, SearchFilters):
            filters = SearchFilters.from_dict(filters)
        min_score = self.min_score if filters.min_score is None else filters.min_score

        index = self.index.get()
        query_embedding = np.asarray(self.embedder.embed(query), dtype=np.float32)

        matrix = self.index.matrix
        if matrix.shape[0] and matrix.shape[1] != query_embedding.shape[0]:
            raise DimensionMismatchError(
                f"Query embedding has {query_embedding.shape[0]} dimensions, "
                f"index has {matrix.shape[1]}"
            )

        positions = np.array(
            [i for i, v in enumerate(index.vectors) if _matches(v, filters)], dtype=np.intp
        )
        if positions.size == 0:
            return []

        scores = matrix[positions] @ query_embedding

        keep = scores >= min_score
        positions, scores = positions[keep], scores[keep]
        order = np.argsort(-scores, kind="stable")

        seen: set[str] = set()
        results: list[SearchResult] = []
        if top_k <= 0:
            return results
        for rank in order:
            vector = index.vectors[positions[rank]]
            if vector.project_id in seen:
                continue
            seen.add(vector.project_id)
            results.append(
                SearchResult(
                    project_id=vector.project_id,
                    type=vector.type.value,
                    source=vector.source,
                    artist=vector.artist,
                    script_type=vector.script_type,
                    score=float(scores[rank]) if include_scores else None,
                )
            )
            if len(results) >= top_k:
                break

        return results

    def search_with_filters(
        self, query: str, filters: FiltersLike, top_k: int = DEFAULT_TOP_K
    ) -> list[SearchResult]:
        return self.search(query, top_k=top_k, filters=filters, include_scores=True)

    def get_index_stats(self) -> dict[str, Any]:
        """Persisted metadata plus the live vector count."""
        index = self.index.get()
        stats = index.metadata.to_dict() if index.metadata else {}
        stats["vectorCount"] = len(index.vectors)
        stats["indexLoaded"] = True
        return stats

    def clear_cache(self) -> None:
        self.index.clear()

    def index_exists(self) -> bool:
        return self.index.exists()
