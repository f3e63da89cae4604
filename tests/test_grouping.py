"""Tests for hunksplit.engine.grouping module."""

import logging

from conftest import make_hunk

from hunksplit.engine import (
    analyze_dependencies,
    create_dependency_groups,
    fallback_order,
    order_group,
    parse_diff,
    topological_sort_hunks,
)


def _assert_partition(hunks, groups):
    """Every hunk in exactly one group, no empty groups."""
    assert all(groups)
    grouped_ids = [hunk.id for group in groups for hunk in group]
    assert sorted(grouped_ids) == sorted(hunk.id for hunk in hunks)
    assert len(grouped_ids) == len(set(grouped_ids))


def _assert_topological(ordered):
    """Every hunk comes after its in-group dependencies."""
    position = {hunk.id: index for index, hunk in enumerate(ordered)}
    for hunk in ordered:
        for dep_id in hunk.dependencies:
            if dep_id in position:
                assert position[dep_id] < position[hunk.id]


# ============================================================================
# Grouping Tests
# ============================================================================


class TestCreateDependencyGroups:
    """Tests for create_dependency_groups function."""

    def test_independent_hunks_separate_groups(self):
        """Test unrelated hunks each get their own group, in input order."""
        first = make_hunk("file.go", 10, 17)
        second = make_hunk("file.go", 21, 24)
        analyze_dependencies([first, second])

        groups = create_dependency_groups([first, second])

        assert [[h.id for h in group] for group in groups] == [
            ["file.go:10-17"],
            ["file.go:21-24"],
        ]

    def test_dependent_hunks_one_group(self):
        """Test hunks linked by proximity share a group."""
        first = make_hunk("f.py", 1, 5)
        second = make_hunk("f.py", 7, 9)
        analyze_dependencies([first, second])

        groups = create_dependency_groups([first, second])

        assert len(groups) == 1
        assert [h.id for h in groups[0]] == ["f.py:1-5", "f.py:7-9"]

    def test_transitive_chain(self):
        """Test a chain a <- b <- c forms a single group."""
        a = make_hunk("f.py", 1, 4)
        b = make_hunk("f.py", 40, 44)
        c = make_hunk("f.py", 80, 84)
        b.add_dependency(a)
        c.add_dependency(b)

        groups = create_dependency_groups([c, a, b])

        assert len(groups) == 1
        assert [h.id for h in groups[0]] == [c.id, a.id, b.id]

    def test_partition_property(self):
        """Test the grouping of a mixed set partitions the input."""
        hunks = [
            make_hunk("a.py", 1, 5),
            make_hunk("a.py", 7, 9),
            make_hunk("a.py", 100, 104),
            make_hunk("b.py", 1, 3, body=" x\n+y\n z"),
            make_hunk("b.py", 50, 52),
            make_hunk("c.py", 1, 1, body="+new"),
        ]
        analyze_dependencies(hunks)

        groups = create_dependency_groups(hunks)

        _assert_partition(hunks, groups)
        assert len(groups) == 4

    def test_ignores_edges_outside_selection(self):
        """Test dependencies on hunks that were not passed in are ignored."""
        first = make_hunk("f.py", 1, 5)
        second = make_hunk("f.py", 7, 9)
        analyze_dependencies([first, second])

        groups = create_dependency_groups([second])

        assert [[h.id for h in group] for group in groups] == [["f.py:7-9"]]

    def test_cycle_still_partitions(self):
        """Test a dependency cycle is grouped without losing hunks."""
        a = make_hunk("f.py", 1, 4)
        b = make_hunk("f.py", 40, 44)
        a.add_dependency(b)
        b.add_dependency(a)

        groups = create_dependency_groups([a, b])

        _assert_partition([a, b], groups)
        assert len(groups) == 1

    def test_empty_input(self):
        """Test no hunks gives no groups."""
        assert create_dependency_groups([]) == []

    def test_deterministic(self, sample_diff):
        """Test repeated grouping yields the same result."""
        first = [[h.id for h in g] for g in create_dependency_groups(parse_diff(sample_diff))]
        second = [[h.id for h in g] for g in create_dependency_groups(parse_diff(sample_diff))]

        assert first == second


# ============================================================================
# Ordering Tests
# ============================================================================


class TestTopologicalSortHunks:
    """Tests for topological_sort_hunks function."""

    def test_proximity_pair_ordered(self):
        """Test hunk 1-5 comes before hunk 7-9."""
        first = make_hunk("f.py", 1, 5)
        second = make_hunk("f.py", 7, 9)
        analyze_dependencies([first, second])

        ordered = topological_sort_hunks([second, first])

        assert [h.id for h in ordered] == ["f.py:1-5", "f.py:7-9"]

    def test_valid_order_for_dag(self):
        """Test a diamond-shaped DAG is ordered topologically."""
        a = make_hunk("f.py", 1, 2)
        b = make_hunk("f.py", 20, 21)
        c = make_hunk("f.py", 40, 41)
        d = make_hunk("f.py", 60, 61)
        b.add_dependency(a)
        c.add_dependency(a)
        d.add_dependency(b)
        d.add_dependency(c)

        ordered = topological_sort_hunks([d, c, b, a])

        assert ordered is not None
        assert len(ordered) == 4
        assert ordered[0] is a and ordered[-1] is d
        _assert_topological(ordered)

    def test_cycle_returns_none(self):
        """Test a cycle yields no order."""
        a = make_hunk("f.py", 1, 4)
        b = make_hunk("f.py", 40, 44)
        a.add_dependency(b)
        b.add_dependency(a)

        assert topological_sort_hunks([a, b]) is None

    def test_out_of_group_dependencies_ignored(self):
        """Test edges to hunks outside the group do not block ordering."""
        outside = make_hunk("f.py", 1, 2)
        inside = make_hunk("f.py", 5, 9)
        inside.add_dependency(outside)

        assert topological_sort_hunks([inside]) == [inside]


class TestOrderGroup:
    """Tests for order_group and fallback_order functions."""

    def test_fallback_order(self):
        """Test fallback sorts by file path, then start line."""
        hunks = [
            make_hunk("b.py", 1, 2),
            make_hunk("a.py", 30, 31),
            make_hunk("a.py", 3, 4),
        ]

        assert [h.id for h in fallback_order(hunks)] == ["a.py:3-4", "a.py:30-31", "b.py:1-2"]

    def test_cycle_uses_fallback_and_warns(self, caplog):
        """Test a cyclic group falls back to the deterministic order."""
        a = make_hunk("f.py", 40, 44)
        b = make_hunk("f.py", 1, 4)
        a.add_dependency(b)
        b.add_dependency(a)
        logger = logging.getLogger("test.grouping")

        with caplog.at_level(logging.WARNING, logger="test.grouping"):
            ordered = order_group([a, b], logger)

        assert [h.id for h in ordered] == ["f.py:1-4", "f.py:40-44"]
        assert any("Cyclic dependencies" in r.message for r in caplog.records)

    def test_fallback_is_idempotent(self):
        """Test the fallback order is stable when applied twice."""
        hunks = [make_hunk("b.py", 9, 9), make_hunk("a.py", 5, 5), make_hunk("a.py", 1, 1)]

        once = fallback_order(hunks)

        assert fallback_order(once) == once

    def test_acyclic_uses_topological_order(self):
        """Test an acyclic group keeps dependency order over position."""
        early = make_hunk("f.py", 1, 2)
        late = make_hunk("f.py", 50, 51)
        # Unusual edge direction, still a DAG
        early.add_dependency(late)

        assert order_group([early, late]) == [late, early]
