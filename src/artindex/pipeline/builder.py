"""Index builder: chunk -> embed -> checkpoint -> merge -> persist."""

import logging
import time
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generator, Iterable, Optional

from artindex.chunkers import ProjectChunker
from artindex.models import Chunk, Document, Index, ProgressEvent, Vector
from artindex.pipeline.changes import ChangeSet, get_changed_projects
from artindex.protocols import ChunkingStrategy, EmbeddingProvider
from artindex.storage import VectorStore

logger = logging.getLogger(__name__)


class BuildMode(str, Enum):
    FULL = "full"
    FORCE = "force"
    INCREMENTAL = "incremental"


@dataclass(frozen=True)
class BuildSummary:
    mode: BuildMode
    documents: int
    changed: int
    unchanged: int
    embedded_chunks: int
    total_vectors: int
    duration_seconds: float
    nothing_to_do: bool = False


def merge_vectors(
    fresh: list[Vector],
    existing: Iterable[Vector],
    drop_projects: Optional[set[str]] = None,
) -> list[Vector]:
    """Union of fresh and existing vectors; fresh wins on id collisions.

    Existing vectors belonging to `drop_projects` are discarded.
    """
    fresh_ids = {v.id for v in fresh}
    merged = list(fresh)
    for vector in existing:
        if vector.id in fresh_ids:
            continue
        if drop_projects and vector.project_id in drop_projects:
            continue
        merged.append(vector)
    return merged


class IndexBuilder:
    """Builds or incrementally updates the persisted vector index.

    Full runs embed every document. Incremental runs embed only documents
    whose checksum changed and keep the stored vectors of the rest. Chunks are
    embedded in sequential batches; every CHECKPOINT_INTERVAL chunks the merged
    vectors so far are saved as a checkpoint together with the checksums of
    documents that are completely embedded, so a restarted incremental run
    skips them.
    """

    BATCH_SIZE = 50
    CHECKPOINT_INTERVAL = 1000

    def __init__(
        self,
        store: VectorStore,
        embedder: EmbeddingProvider,
        chunker: Optional[ChunkingStrategy] = None,
        batch_size: Optional[int] = None,
        checkpoint_interval: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.embedder = embedder
        self.chunker = chunker or ProjectChunker()
        self.batch_size = batch_size or self.BATCH_SIZE
        self.checkpoint_interval = checkpoint_interval or self.CHECKPOINT_INTERVAL
        self._clock = clock

    def run(
        self,
        documents: list[Document],
        mode: BuildMode = BuildMode.INCREMENTAL,
        complete_corpus: bool = True,
        on_progress: Optional[Callable[[ProgressEvent], None]] = None,
    ) -> BuildSummary:
        """Run the pipeline to completion and return its summary."""
        events = self.iter_run(documents, mode, complete_corpus)
        while True:
            try:
                event = next(events)
            except StopIteration as stop:
                return stop.value
            if on_progress is not None:
                on_progress(event)

    def iter_run(
        self,
        documents: list[Document],
        mode: BuildMode = BuildMode.INCREMENTAL,
        complete_corpus: bool = True,
    ) -> Generator[ProgressEvent, None, BuildSummary]:
        """Run the pipeline, yielding a ProgressEvent after every batch.

        Args:
            documents: The current corpus, in order
            mode: FULL/FORCE re-embed everything; INCREMENTAL only changed documents
            complete_corpus: False when `documents` is a truncated view of the
                corpus; stored vectors of absent projects are then kept

        Returns (as the generator's return value):
            BuildSummary describing the run
        """
        start = self._clock()

        existing: Optional[Index] = None
        if mode is BuildMode.INCREMENTAL:
            existing, changes = self._incremental_plan(documents)
            if existing is None:
                mode = BuildMode.FULL

        stale_projects: set[str] = set()
        if existing is not None:
            if complete_corpus:
                stale_projects = existing.project_ids() - {d.id for d in documents}
                if stale_projects:
                    logger.info(f"Dropping vectors of {len(stale_projects)} removed projects")

            if not changes.has_changes and not stale_projects and existing.is_complete:
                logger.info("No documents changed. Nothing to do.")
                return BuildSummary(
                    mode=mode,
                    documents=len(documents),
                    changed=0,
                    unchanged=len(changes.unchanged),
                    embedded_chunks=0,
                    total_vectors=len(existing.vectors),
                    duration_seconds=self._clock() - start,
                    nothing_to_do=True,
                )

        model = self.embedder.model_name
        dimensions = self.embedder.dimension
        if existing is not None and existing.metadata.dimensions != dimensions:
            logger.warning(
                f"Stored index has {existing.metadata.dimensions} dimensions, model "
                f"produces {dimensions}. Running full generation."
            )
            existing = None
            stale_projects = set()
            mode = BuildMode.FULL

        if existing is None:
            changes = get_changed_projects(documents, {})
            changes.changed.extend(changes.unchanged)
            changes.unchanged = []
            retained: list[Vector] = []
            base_checksums: dict[str, str] = {}
        else:
            retained = existing.vectors
            base_checksums = self.store.load_checksums()

        logger.info(
            f"Mode: {mode.value} - {len(changes.changed)} changed, "
            f"{len(changes.unchanged)} unchanged"
        )

        chunks = [c for d in changes.changed for c in self.chunker.chunk(d)]
        chunk_counts = Counter(c.project_id for c in chunks)
        logger.info(f"Chunked {len(changes.changed)} documents into {len(chunks)} chunks")

        drop_projects = stale_projects | {d.id for d in changes.changed}

        fresh: list[Vector] = []
        embedded_counts: Counter[str] = Counter()
        total = len(chunks)
        last_checkpoint = 0
        for batch_start in range(0, total, self.batch_size):
            batch = chunks[batch_start : batch_start + self.batch_size]
            embeddings = self.embedder.embed_batch([c.content for c in batch], self.batch_size)
            fresh.extend(self._to_vector(c, e) for c, e in zip(batch, embeddings))
            embedded_counts.update(c.project_id for c in batch)

            processed = batch_start + len(batch)
            checkpointed = False
            interval = self.checkpoint_interval
            if processed // interval > last_checkpoint // interval and processed < total:
                done = {p for p, n in embedded_counts.items() if n == chunk_counts[p]}
                checksums = dict(base_checksums)
                for document in changes.unchanged:
                    checksums[document.id] = changes.new_checksums[document.id]
                for doc_id in done:
                    checksums[doc_id] = changes.new_checksums[doc_id]

                merged = merge_vectors(fresh, retained, drop_projects)
                metadata = self.store.create_metadata(
                    len(documents), len(merged), model=model, dimensions=dimensions
                )
                self.store.save_checkpoint(merged, metadata, processed)
                self.store.save_checksums(checksums)
                last_checkpoint = processed
                checkpointed = True

            yield ProgressEvent(
                processed=processed,
                total=total,
                elapsed_seconds=self._clock() - start,
                checkpointed=checkpointed,
            )

        vectors = merge_vectors(fresh, retained, drop_projects)
        metadata = self.store.create_metadata(
            len(documents), len(vectors), model=model, dimensions=dimensions
        )
        self.store.save_index(Index(vectors=vectors, metadata=metadata))

        checksums = dict(changes.new_checksums)
        if not complete_corpus:
            checksums = {**base_checksums, **checksums}
        self.store.save_checksums(checksums)

        return BuildSummary(
            mode=mode,
            documents=len(documents),
            changed=len(changes.changed),
            unchanged=len(changes.unchanged),
            embedded_chunks=len(fresh),
            total_vectors=len(vectors),
            duration_seconds=self._clock() - start,
        )

    def _incremental_plan(
        self, documents: list[Document]
    ) -> tuple[Optional[Index], ChangeSet]:
        """Load the stored baseline and classify documents against it.

        Returns (None, empty) when there is no usable baseline and a full
        run is required.
        """
        existing = self.store.load_index()
        checksums = self.store.load_checksums()
        if existing is None or existing.metadata is None:
            logger.info("No existing index found. Running full generation.")
            return None, ChangeSet()
        if not checksums:
            logger.info("No stored checksums found. Running full generation.")
            return None, ChangeSet()
        if existing.metadata.model != self.embedder.model_name:
            logger.warning(
                f"Stored index was built with {existing.metadata.model}, current model "
                f"is {self.embedder.model_name}. Running full generation."
            )
            return None, ChangeSet()
        if existing.metadata.checkpoint:
            logger.info(
                f"Resuming from checkpoint with {len(existing.vectors)} vectors"
            )

        changes = get_changed_projects(documents, checksums)

        # A matching checksum only counts if the vectors it describes survived
        stored_ids = {v.id for v in existing.vectors}
        confirmed = []
        for document in changes.unchanged:
            expected = {c.id for c in self.chunker.chunk(document)}
            if expected <= stored_ids:
                confirmed.append(document)
            else:
                changes.changed.append(document)
        if len(confirmed) != len(changes.unchanged):
            logger.info(
                f"{len(changes.unchanged) - len(confirmed)} documents are missing "
                "vectors and will be re-embedded"
            )
            order = {d.id: i for i, d in enumerate(documents)}
            changes.changed.sort(key=lambda d: order[d.id])
        changes.unchanged = confirmed

        return existing, changes

    @staticmethod
    def _to_vector(chunk: Chunk, embedding) -> Vector:
        return Vector(
            id=chunk.id,
            project_id=chunk.project_id,
            type=chunk.type,
            embedding=embedding,
            source=chunk.source,
            artist=chunk.artist,
            script_type=chunk.script_type,
        )
