"""
Tests for building the ownership tree from flat records.

These tests cover parent resolution, the isolation filter, duplicate ids
and cyclic parent references in imported data.
"""

import warnings

import pytest

from orgchart.core.builder import build_forest
from orgchart.core.errors import DuplicateIdWarning
from orgchart.core.models import FlatRecord


def _shape(nodes):
    """Reduce a forest to nested (id, [children]) tuples."""
    return [(node.id, _shape(node.children)) for node in nodes]


class TestBuildForest:
    """Tests for build_forest."""

    def test_empty_input(self):
        """Test that no records give no roots."""
        assert build_forest([]) == []

    def test_sample_company(self, sample_records):
        """Test the sample hierarchy and removal of the isolated record."""
        roots = build_forest(sample_records)

        assert _shape(roots) == [
            ("ceo", [("cto", [("dev1", []), ("dev2", [])]), ("cfo", [])]),
        ]

    def test_isolated_root_is_dropped(self):
        """Test A -> B plus an unrelated C: C is filtered out."""
        records = [
            FlatRecord(id="A", name="A"),
            FlatRecord(id="B", name="B", parent_id="A"),
            FlatRecord(id="C", name="C"),
        ]

        roots = build_forest(records)

        assert _shape(roots) == [("A", [("B", [])])]

    def test_all_isolated_gives_empty_forest(self):
        """Test that a set of unrelated records builds nothing."""
        records = [FlatRecord(id="a", name="A"), FlatRecord(id="b", name="B")]

        assert build_forest(records) == []

    def test_children_follow_source_order(self):
        """Test that children are attached in record order, even before their parent appears."""
        records = [
            FlatRecord(id="c2", name="C2", parent_id="p"),
            FlatRecord(id="p", name="P"),
            FlatRecord(id="c1", name="C1", parent_id="p"),
        ]

        roots = build_forest(records)

        assert _shape(roots) == [("p", [("c2", []), ("c1", [])])]

    def test_multiple_roots_keep_source_order(self):
        """Test that several connected trees are returned in record order."""
        records = [
            FlatRecord(id="b", name="B"),
            FlatRecord(id="b1", name="B1", parent_id="b"),
            FlatRecord(id="a", name="A"),
            FlatRecord(id="a1", name="A1", parent_id="a"),
        ]

        assert [root.id for root in build_forest(records)] == ["b", "a"]

    def test_dangling_parent_is_treated_as_root(self):
        """Test that an unknown parentId means no parent."""
        records = [
            FlatRecord(id="a", name="A", parent_id="ghost"),
            FlatRecord(id="b", name="B", parent_id="a"),
        ]

        roots = build_forest(records)

        assert _shape(roots) == [("a", [("b", [])])]
        assert roots[0].parent_id is None

    def test_dangling_parent_without_children_is_dropped(self):
        """Test that a dangling reference alone does not keep a record."""
        records = [
            FlatRecord(id="a", name="A"),
            FlatRecord(id="b", name="B", parent_id="a"),
            FlatRecord(id="x", name="X", parent_id="ghost"),
        ]

        assert _shape(build_forest(records)) == [("a", [("b", [])])]

    def test_self_reference_is_no_parent(self):
        """Test that a record naming itself as parent is a root."""
        records = [
            FlatRecord(id="a", name="A", parent_id="a"),
            FlatRecord(id="b", name="B", parent_id="a"),
        ]

        roots = build_forest(records)

        assert _shape(roots) == [("a", [("b", [])])]

    def test_records_without_id_are_skipped(self):
        """Test that rows with an empty id are ignored."""
        records = [
            FlatRecord(id="", name="Nobody", parent_id="a"),
            FlatRecord(id="a", name="A"),
            FlatRecord(id="b", name="B", parent_id="a"),
        ]

        assert _shape(build_forest(records)) == [("a", [("b", [])])]

    def test_fields_are_copied(self, sample_records):
        """Test that scalar fields and defaults carry over to nodes."""
        root = build_forest(sample_records)[0]

        assert root.name == "Ada Lovelace"
        assert root.title == "Chief Executive Officer"
        assert root.department == "Executive"
        assert root.image_url == "https://example.com/ada.png"
        assert root.collapsed is False
        assert root.children[0].parent_id == "ceo"

    def test_blank_name_defaults(self):
        """Test that a nameless record is shown as 'Unnamed'."""
        records = [FlatRecord(id="a", name=""), FlatRecord(id="b", name="B", parent_id="a")]

        assert build_forest(records)[0].name == "Unnamed"


class TestDuplicateIds:
    """Tests for repeated ids in imported data."""

    def test_last_record_wins_with_warning(self):
        """Test that the later duplicate overwrites the earlier one."""
        records = [
            FlatRecord(id="a", name="First"),
            FlatRecord(id="b", name="B", parent_id="a"),
            FlatRecord(id="a", name="Second"),
        ]

        with pytest.warns(DuplicateIdWarning, match="a"):
            roots = build_forest(records)

        assert len(roots) == 1
        assert roots[0].name == "Second"
        assert [child.id for child in roots[0].children] == ["b"]

    def test_no_warning_for_unique_ids(self, sample_records):
        """Test that clean data builds silently."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            build_forest(sample_records)


class TestCycles:
    """Tests for cyclic parent references in imported data."""

    def test_two_node_cycle_is_broken(self):
        """Test that A <-> B becomes a single tree rooted at the first record."""
        records = [
            FlatRecord(id="A", name="A", parent_id="B"),
            FlatRecord(id="B", name="B", parent_id="A"),
        ]

        roots = build_forest(records)

        assert _shape(roots) == [("A", [("B", [])])]
        assert roots[0].parent_id is None

    def test_longer_cycle_with_tail(self):
        """Test a cycle A -> B -> C -> A with a leaf D hanging off C."""
        records = [
            FlatRecord(id="D", name="D", parent_id="C"),
            FlatRecord(id="B", name="B", parent_id="A"),
            FlatRecord(id="C", name="C", parent_id="B"),
            FlatRecord(id="A", name="A", parent_id="C"),
        ]

        roots = build_forest(records)

        # B is the first cycle member in source order
        assert _shape(roots) == [("B", [("C", [("D", []), ("A", [])])])]

    def test_cycle_next_to_normal_tree(self):
        """Test that a cycle does not disturb an unrelated tree."""
        records = [
            FlatRecord(id="r", name="R"),
            FlatRecord(id="r1", name="R1", parent_id="r"),
            FlatRecord(id="x", name="X", parent_id="y"),
            FlatRecord(id="y", name="Y", parent_id="x"),
        ]

        roots = build_forest(records)

        assert _shape(roots) == [("r", [("r1", [])]), ("x", [("y", [])])]
