"""
Unit tests for the JSON vector store.

Tests index persistence, checkpoints, absence handling and atomic writes.
"""

import json

import numpy as np
import pytest

from artindex.errors import DimensionMismatchError
from artindex.models import ChunkType, Index, Vector
from artindex.storage import VectorStore


def make_vector(vector_id: str, project_id: str, dims: int = 4) -> Vector:
    embedding = np.zeros(dims, dtype=np.float32)
    embedding[0] = 1.0
    return Vector(
        id=vector_id,
        project_id=project_id,
        type=ChunkType.METADATA,
        embedding=embedding,
        source="artblocks",
        artist="Ana",
        script_type="p5js",
    )


def make_index(store: VectorStore, count: int = 2, dims: int = 4) -> Index:
    vectors = [make_vector(f"p{i}_metadata", f"p{i}", dims) for i in range(count)]
    metadata = store.create_metadata(count, count, model="fake-model", dimensions=dims)
    return Index(vectors=vectors, metadata=metadata)


class TestSaveAndLoad:
    """Test suite for complete index persistence."""

    def test_save_creates_directory_and_both_files(self, store):
        """Test saving into a missing directory writes vectors and metadata."""
        store.save_index(make_index(store))

        assert store.vectors_path.exists()
        assert store.metadata_path.exists()
        assert store.index_exists()

    def test_load_returns_saved_vectors(self, store):
        """Test vectors and metadata are read back."""
        store.save_index(make_index(store, count=3))

        index = store.load_index()

        assert [v.id for v in index.vectors] == ["p0_metadata", "p1_metadata", "p2_metadata"]
        assert index.vectors[0].embedding.dtype == np.float32
        assert index.metadata.dimensions == 4
        assert index.is_complete
        assert store.is_consistent(index)

    def test_vectors_file_uses_camel_case_records(self, store):
        """Test the persisted record layout."""
        store.save_index(make_index(store, count=1))

        record = json.loads(store.vectors_path.read_text())[0]

        assert set(record) == {"id", "projectId", "type", "embedding", "source", "artist", "scriptType"}
        assert record["type"] == "metadata"

    def test_save_overwrites_previous_index(self, store):
        """Test a second save replaces the first."""
        store.save_index(make_index(store, count=3))
        store.save_index(make_index(store, count=1))

        assert len(store.load_index().vectors) == 1

    def test_metadata_stamp(self, store):
        """Test create_metadata records model, counts and format version."""
        meta = store.create_metadata(10, 15, model="fake-model", dimensions=384)

        assert meta.model == "fake-model"
        assert meta.dimensions == 384
        assert meta.project_count == 10
        assert meta.chunk_count == 15
        assert meta.version == "1.0.0"
        assert meta.created

    def test_mixed_dimensions_rejected(self, store):
        """Test a vector of the wrong length cannot be saved."""
        index = make_index(store, count=1, dims=4)
        index.vectors.append(make_vector("odd_metadata", "odd", dims=3))

        with pytest.raises(DimensionMismatchError):
            store.save_index(index)


class TestAbsenceAndCorruption:
    """Test suite for missing or malformed artifacts."""

    def test_missing_index_loads_as_none(self, store):
        """Test load_index returns None when nothing is persisted."""
        assert store.load_index() is None
        assert store.get_metadata() is None
        assert not store.index_exists()

    def test_one_file_missing_means_no_index(self, store):
        """Test both artifacts are required."""
        store.save_index(make_index(store))
        store.metadata_path.unlink()

        assert not store.index_exists()
        assert store.load_index() is None

    def test_malformed_vectors_load_as_none(self, store):
        """Test unparseable JSON is treated as no index."""
        store.save_index(make_index(store))
        store.vectors_path.write_text("{not json")

        assert store.load_index() is None

    def test_vector_record_missing_keys_loads_as_none(self, store):
        """Test structurally invalid records are treated as no index."""
        store.save_index(make_index(store))
        store.vectors_path.write_text(json.dumps([{"id": "x"}]))

        assert store.load_index() is None

    def test_get_metadata_without_vectors(self, store):
        """Test metadata can be read on its own."""
        store.save_index(make_index(store, count=2))
        store.vectors_path.unlink()

        assert store.get_metadata().chunk_count == 2

    def test_count_mismatch_is_detectable(self, store):
        """Test is_consistent flags metadata that disagrees with the vectors."""
        index = make_index(store, count=2)
        index.metadata.chunk_count = 5
        store.save_index(index)

        loaded = store.load_index()

        assert loaded is not None
        assert not store.is_consistent(loaded)

    def test_wrong_embedding_length_loads_as_none(self, store):
        """Test an embedding that disagrees with metadata dimensions is treated as no index."""
        store.save_index(make_index(store, count=2, dims=4))
        records = json.loads(store.vectors_path.read_text())
        records[1]["embedding"] = [1.0, 0.0, 0.0, 0.0, 0.0]
        store.vectors_path.write_text(json.dumps(records))

        assert store.load_index() is None


class TestCheckpoint:
    """Test suite for checkpoint persistence."""

    def test_checkpoint_is_marked_incomplete(self, store):
        """Test checkpoint metadata carries the progress annotations."""
        index = make_index(store, count=2)

        store.save_checkpoint(index.vectors, index.metadata, processed=2)
        raw = json.loads(store.metadata_path.read_text())
        loaded = store.load_index()

        assert raw["checkpoint"] is True
        assert raw["processedChunks"] == 2
        assert "lastCheckpoint" in raw
        assert not loaded.is_complete

    def test_final_save_clears_checkpoint_flag(self, store):
        """Test a completed save after a checkpoint is not marked incomplete."""
        index = make_index(store, count=2)
        store.save_checkpoint(index.vectors, index.metadata, processed=2)

        store.save_index(index)

        assert "checkpoint" not in json.loads(store.metadata_path.read_text())


class TestChecksums:
    """Test suite for the checksum artifact."""

    def test_missing_checksums_are_empty(self, store):
        """Test absent checksums load as an empty map."""
        assert store.load_checksums() == {}

    def test_checksums_round_trip(self, store):
        """Test saved checksums are read back."""
        store.save_checksums({"p2": "h2", "p1": "h1"})

        assert store.load_checksums() == {"p1": "h1", "p2": "h2"}

    def test_malformed_checksums_are_empty(self, store):
        """Test a non-object checksum file is ignored."""
        store.ensure_dir()
        store.checksums_path.write_text("[1, 2]")

        assert store.load_checksums() == {}


class TestAtomicWrites:
    """Test suite for write-to-temp-then-rename behavior."""

    def test_no_temp_files_left_behind(self, store):
        """Test only the three artifacts remain after saving."""
        store.save_index(make_index(store))
        store.save_checksums({"p0": "h"})

        names = sorted(p.name for p in store.index_dir.iterdir())

        assert names == ["checksums.json", "metadata.json", "vectors.json"]

    def test_failed_write_keeps_previous_file(self, store, monkeypatch):
        """Test an exception mid-write leaves the old artifact intact."""
        store.save_index(make_index(store, count=2))
        before = store.vectors_path.read_bytes()

        def broken_dump(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr("artindex.storage.store.json.dump", broken_dump)
        with pytest.raises(OSError):
            store.save_index(make_index(store, count=5))

        assert store.vectors_path.read_bytes() == before
        assert sorted(p.name for p in store.index_dir.iterdir()) == ["metadata.json", "vectors.json"]
