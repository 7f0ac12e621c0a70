"""
Unit tests for content-hash change detection.
"""

from artindex.pipeline import compute_checksum, get_changed_projects


class TestComputeChecksum:
    """Test suite for compute_checksum."""

    def test_stable_for_equal_documents(self, make_doc):
        """Test equal documents hash identically."""
        a = make_doc("p1", "content", patterns=["noise"], artist="Ana")
        b = make_doc("p1", "content", patterns=["noise"], artist="Ana")

        assert compute_checksum(a) == compute_checksum(b)

    def test_sensitive_to_embedded_fields(self, make_doc):
        """Test content, tags and descriptive metadata all change the hash."""
        base = make_doc("p1", "content", patterns=["noise"], artist="Ana")
        variants = [
            make_doc("p1", "content!", patterns=["noise"], artist="Ana"),
            make_doc("p1", "content", patterns=["grid"], artist="Ana"),
            make_doc("p1", "content", patterns=["noise"], artist="Bo"),
            make_doc("p1", "content", patterns=["noise"], artist="Ana", script_type="p5js"),
        ]

        assert all(compute_checksum(v) != compute_checksum(base) for v in variants)

    def test_is_hex_sha256(self, make_doc):
        """Test the checksum format."""
        checksum = compute_checksum(make_doc("p1"))

        assert len(checksum) == 64
        int(checksum, 16)


class TestGetChangedProjects:
    """Test suite for get_changed_projects."""

    def test_new_and_unchanged_documents(self, make_doc):
        """Test a stored id with matching hash is unchanged and an unknown id is changed."""
        p1 = make_doc("p1", "first")
        p2 = make_doc("p2", "second")
        checksums = {"p1": compute_checksum(p1)}

        result = get_changed_projects([p1, p2], checksums)

        assert [d.id for d in result.changed] == ["p2"]
        assert [d.id for d in result.unchanged] == ["p1"]

    def test_modified_document_is_changed(self, make_doc):
        """Test a differing stored hash marks the document changed."""
        result = get_changed_projects([make_doc("p1", "new text")], {"p1": "stale"})

        assert [d.id for d in result.changed] == ["p1"]
        assert result.has_changes

    def test_new_checksums_cover_every_document(self, make_doc):
        """Test new_checksums includes changed and unchanged documents."""
        p1, p2 = make_doc("p1"), make_doc("p2")

        result = get_changed_projects([p1, p2], {"p1": compute_checksum(p1)})

        assert result.new_checksums == {"p1": compute_checksum(p1), "p2": compute_checksum(p2)}

    def test_no_stored_checksums_means_everything_changed(self, make_doc):
        """Test an empty map classifies all documents as changed."""
        result = get_changed_projects([make_doc("a"), make_doc("b")], {})

        assert len(result.changed) == 2
        assert result.unchanged == []
