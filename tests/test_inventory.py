"""Tests for hunksplit.engine.inventory module."""

from conftest import make_hunk

from hunksplit.engine import (
    build_hunk_map,
    create_dependency_groups,
    format_hunk_inventory,
    group_summary,
    parse_diff,
    preview_hunk_application,
)


class TestPreviewHunkApplication:
    """Tests for preview_hunk_application function."""

    def test_no_hunks(self):
        """Test an empty selection."""
        assert preview_hunk_application([], {}) == "No hunks selected."

    def test_single_file(self):
        """Test the preview lists the file and its hunks."""
        hunk = make_hunk("test.go", 1, 5)

        preview = preview_hunk_application([hunk.id], {hunk.id: hunk})

        assert preview == "File: test.go\n  - test.go:1-5 (lines 1-5)\n"

    def test_files_in_selection_order_hunks_sorted(self):
        """Test files follow first mention and hunks are sorted by line."""
        hunks = [make_hunk("b.go", 30, 32), make_hunk("a.go", 1, 2), make_hunk("b.go", 4, 6)]
        hunk_map = {h.id: h for h in hunks}

        preview = preview_hunk_application([h.id for h in hunks], hunk_map)

        assert preview == (
            "File: b.go\n"
            "  - b.go:4-6 (lines 4-6)\n"
            "  - b.go:30-32 (lines 30-32)\n"
            "\n"
            "File: a.go\n"
            "  - a.go:1-2 (lines 1-2)\n"
        )

    def test_unknown_ids_skipped(self):
        """Test IDs missing from the map are left out."""
        hunk = make_hunk("test.go", 1, 5)

        preview = preview_hunk_application(["nope:1-1", hunk.id], {hunk.id: hunk})

        assert "nope" not in preview
        assert "test.go:1-5" in preview


class TestFormatHunkInventory:
    """Tests for format_hunk_inventory function."""

    def test_lists_files_and_hunks(self, sample_diff):
        """Test every file and hunk appears with its change summary."""
        inventory = format_hunk_inventory(parse_diff(sample_diff))

        assert inventory.startswith("[HUNK INVENTORY]")
        assert "File: src/main.py" in inventory
        assert "Hunk src/main.py:10-17: addition (+2 -0)" in inventory
        assert "File: tests/test_main.py\n  (new file)" in inventory

    def test_shows_dependencies(self, sample_diff):
        """Test dependencies are listed under the dependent hunk."""
        inventory = format_hunk_inventory(parse_diff(sample_diff))

        assert "depends on: src/main.py:10-17" in inventory

    def test_context_optional(self, tmp_path):
        """Test context lines appear only when asked for."""
        (tmp_path / "f.txt").write_text("a\nb\nc\n")
        diff = "diff --git a/f.txt b/f.txt\n--- a/f.txt\n+++ b/f.txt\n@@ -2 +2 @@\n-x\n+b\n"
        hunks = parse_diff(diff, repo_root=tmp_path)

        assert ">>>" not in format_hunk_inventory(hunks)
        assert ">>>    2: b" in format_hunk_inventory(hunks, show_context=True)


class TestGroupSummary:
    """Tests for group_summary function."""

    def test_one_line_per_group(self, sample_diff):
        """Test each group is summarized on its own line."""
        hunks = parse_diff(sample_diff)

        summary = group_summary(create_dependency_groups(hunks))

        assert summary.split("\n") == [
            "Group 1 (2 hunks): src/main.py:10-17, src/main.py:42-46",
            "Group 2 (1 hunk): tests/test_main.py:1-5",
        ]

    def test_no_groups(self):
        """Test an empty grouping."""
        assert group_summary([]) == "No dependency groups."

    def test_uses_hunk_map_ids(self, sample_diff):
        """Test summaries use the same IDs as the hunk map."""
        hunk_map = build_hunk_map(parse_diff(sample_diff))

        summary = group_summary(create_dependency_groups(list(hunk_map.values())))

        for hunk_id in hunk_map:
            assert hunk_id in summary
