"""
Unit tests for the project chunker.

Tests chunk composition, truncation, tag thresholds and stats.
"""

import pytest

from artindex.chunkers import ProjectChunker, get_chunking_stats
from artindex.models import ChunkType, Document


@pytest.fixture
def chunker():
    return ProjectChunker()


class TestProjectChunker:
    """Test suite for ProjectChunker.chunk."""

    def test_flow_field_project_yields_metadata_and_tags(self, chunker):
        """Test the canonical artblocks example produces both chunks."""
        doc = Document.from_dict(
            {
                "id": "artblocks_1",
                "content": "Flow field study",
                "metadata": {
                    "source": "artblocks",
                    "project_id": 1,
                    "patterns": ["perlin_noise", "flow_field"],
                    "aesthetics": ["organic"],
                },
            }
        )

        chunks = chunker.chunk(doc)

        assert [c.id for c in chunks] == ["artblocks_1_metadata", "artblocks_1_tags"]
        assert chunks[0].type is ChunkType.METADATA
        assert chunks[0].content == "Flow field study"
        assert chunks[1].content == "Aesthetics: organic. Patterns: perlin_noise, flow_field"

    def test_chunks_carry_document_id_and_metadata(self, chunker, make_doc):
        """Test chunk attributes come from the document, projectId is the document id."""
        doc = make_doc("fxhash_9", source="fxhash", project_id=9, artist="Ana", script_type="p5js")

        chunk = chunker.chunk(doc)[0]

        assert chunk.project_id == "fxhash_9"
        assert chunk.source == "fxhash"
        assert chunk.artist == "Ana"
        assert chunk.script_type == "p5js"

    def test_content_truncated_to_limit(self, chunker, make_doc):
        """Test long content is cut to MAX_CONTENT_CHARS."""
        doc = make_doc("p1", content="x" * 5000)

        chunk = chunker.chunk(doc)[0]

        assert len(chunk.content) == ProjectChunker.MAX_CONTENT_CHARS

    def test_missing_content_uses_fallback(self, chunker, make_doc):
        """Test absent content produces "Project {id} by {artist}"."""
        doc = make_doc("artblocks_7", content=None, project_id=7, artist="Zed")

        assert chunker.chunk(doc)[0].content == "Project 7 by Zed"

    def test_fallback_uses_document_id_without_project_id(self, chunker, make_doc):
        """Test the fallback falls back to the document id and default artist."""
        doc = make_doc("loose_doc", content="")

        assert chunker.chunk(doc)[0].content == "Project loose_doc by Unknown Artist"

    def test_short_tag_text_is_not_chunked(self, chunker, make_doc):
        """Test tags of 30 characters or fewer yield no tags chunk."""
        doc = make_doc("p1", aesthetics=["calm"])  # "Aesthetics: calm" is 16 chars

        chunks = chunker.chunk(doc)

        assert [c.type for c in chunks] == [ChunkType.METADATA]

    def test_tag_threshold_is_strictly_greater_than_30(self, chunker, make_doc):
        """Test exactly 30 characters is still too short, 31 is enough."""
        exactly_30 = make_doc("p1", patterns=["a" * 20])  # "Patterns: " + 20
        just_over = make_doc("p2", patterns=["a" * 21])

        assert len(chunker.tag_text(exactly_30)) == 30
        assert len(chunker.chunk(exactly_30)) == 1
        assert len(chunker.chunk(just_over)) == 2

    def test_patterns_only(self, chunker, make_doc):
        """Test a document with patterns but no aesthetics."""
        doc = make_doc("p1", patterns=["recursion", "grid_subdivision"])

        tags = chunker.chunk(doc)[1]

        assert tags.content == "Patterns: recursion, grid_subdivision"

    def test_malformed_metadata_degrades_to_defaults(self, chunker):
        """Test wrong-typed metadata fields never raise."""
        doc = Document.from_dict(
            {"id": "p1", "content": "c", "metadata": {"patterns": 42, "aesthetics": None, "artist": ""}}
        )

        chunks = chunker.chunk(doc)

        assert len(chunks) == 1
        assert chunks[0].artist == "Unknown Artist"
        assert chunks[0].source == "unknown"

    def test_always_exactly_one_metadata_chunk(self, chunker, make_doc):
        """Test the metadata chunk invariant across varied documents."""
        docs = [
            make_doc("a"),
            make_doc("b", content=None),
            make_doc("c", patterns=["x"] * 10, aesthetics=["y"] * 10),
            make_doc("d", aesthetics=["a very long aesthetic description"]),
        ]

        for doc in docs:
            types = [c.type for c in chunker.chunk(doc)]
            assert types.count(ChunkType.METADATA) == 1
            assert types[0] is ChunkType.METADATA
            has_tags = len(chunker.tag_text(doc)) > ProjectChunker.MIN_TAG_CHARS
            assert (ChunkType.TAGS in types) == has_tags


class TestChunkMany:
    """Test suite for flattening and stats."""

    def test_preserves_document_order(self, chunker, make_doc):
        """Test chunks follow input order, metadata before tags."""
        docs = [
            make_doc("b", patterns=["perlin_noise", "flow_field", "particles"]),
            make_doc("a"),
        ]

        ids = [c.id for c in chunker.chunk_many(docs)]

        assert ids == ["b_metadata", "b_tags", "a_metadata"]

    def test_chunking_stats(self, chunker, make_doc):
        """Test stats count chunk types and the per-project average."""
        docs = [
            make_doc("a", patterns=["perlin_noise", "flow_field", "particles"]),
            make_doc("b"),
        ]

        stats = get_chunking_stats(chunker.chunk_many(docs), len(docs))

        assert stats.total_chunks == 3
        assert stats.metadata_chunks == 2
        assert stats.tag_chunks == 1
        assert stats.avg_chunks_per_project == pytest.approx(1.5)

    def test_stats_for_empty_corpus(self):
        """Test average is zero with no projects."""
        assert get_chunking_stats([], 0).avg_chunks_per_project == 0.0
