"""Tests for hunksplit.engine.executor module."""

import pytest
from conftest import commit_files, git, numbered_lines

from hunksplit.config import EngineConfig
from hunksplit.engine import (
    CommitPlan,
    PlannedCommit,
    PlanExecutionError,
    build_hunk_map,
    execute_plan,
    parse_diff,
)
from hunksplit.engine.executor import check_plan_hunks
from hunksplit.git.branch import reset_hard
from hunksplit.git.diff import get_diff_against


BASE = numbered_lines(24)
FEATURE = BASE.replace("line 13\n", "LINE 13\n").replace("line 24\n", "LINE 24\n")


@pytest.fixture
def feature_branch(temp_repo):
    """Repo whose HEAD adds two independent changes on top of a base commit.

    Returns the repo, the base SHA, the diff against the base and its hunks,
    with the checkout already reset to the base.
    """
    commit_files(temp_repo, {"app.txt": BASE}, "Base")
    base_sha = git(temp_repo, "rev-parse", "HEAD").strip()
    commit_files(temp_repo, {"app.txt": FEATURE, "notes.md": "notes\n"}, "Feature")

    diff_text = get_diff_against(temp_repo, base_sha)
    hunks = parse_diff(diff_text, repo_root=temp_repo)
    reset_hard(temp_repo, base_sha)
    return temp_repo, base_sha, diff_text, hunks


def _ids(hunks, path):
    return [h.id for h in hunks if h.file_path == path]


class TestExecutePlan:
    """Tests for execute_plan function."""

    def test_creates_commits_in_order(self, feature_branch):
        """Test each planned commit becomes a real commit."""
        repo, base_sha, diff_text, hunks = feature_branch
        plan = CommitPlan(
            commits=[
                PlannedCommit(message="Update app", hunk_ids=_ids(hunks, "app.txt")),
                PlannedCommit(message="Add notes\n\nLonger body.", hunk_ids=_ids(hunks, "notes.md")),
            ]
        )

        shas = execute_plan(repo, plan, build_hunk_map(hunks), diff_text)

        assert len(shas) == 2
        assert git(repo, "log", "--format=%s", f"{base_sha}..HEAD").split("\n")[:2] == [
            "Add notes",
            "Update app",
        ]
        assert git(repo, "rev-parse", "HEAD").strip() == shas[-1]
        assert (repo / "app.txt").read_text() == FEATURE
        assert (repo / "notes.md").read_text() == "notes\n"
        assert git(repo, "status", "--porcelain") == ""

    def test_splits_one_file_across_commits(self, feature_branch):
        """Test independent hunks of one file can go to different commits."""
        repo, base_sha, diff_text, hunks = feature_branch
        app_ids = _ids(hunks, "app.txt")
        assert len(app_ids) == 2
        plan = CommitPlan(
            commits=[
                PlannedCommit(message="First change", hunk_ids=[app_ids[0]]),
                PlannedCommit(message="Second change", hunk_ids=[app_ids[1]] + _ids(hunks, "notes.md")),
            ]
        )

        shas = execute_plan(repo, plan, build_hunk_map(hunks), diff_text)

        first_content = git(repo, "show", f"{shas[0]}:app.txt")
        assert "LINE 13" in first_content
        assert "LINE 24" not in first_content
        assert (repo / "app.txt").read_text() == FEATURE

    def test_unknown_hunk_fails_before_committing(self, feature_branch):
        """Test an unknown hunk ID fails without creating commits."""
        repo, base_sha, diff_text, hunks = feature_branch
        plan = CommitPlan(
            commits=[PlannedCommit(message="Broken", hunk_ids=["app.txt:1-2"])]
        )

        with pytest.raises(PlanExecutionError) as exc_info:
            execute_plan(repo, plan, build_hunk_map(hunks), diff_text, backup_ref="backup/main-10-00-00")

        assert exc_info.value.commit_index == 1
        assert "backup/main-10-00-00" in str(exc_info.value)
        assert git(repo, "rev-parse", "HEAD").strip() == base_sha

    def test_failure_reports_commit_index(self, feature_branch):
        """Test a commit with nothing to apply fails with its index."""
        repo, base_sha, diff_text, hunks = feature_branch
        plan = CommitPlan(
            commits=[
                PlannedCommit(message="Update app", hunk_ids=_ids(hunks, "app.txt")),
                PlannedCommit(message="Empty", hunk_ids=[]),
            ]
        )

        with pytest.raises(PlanExecutionError) as exc_info:
            execute_plan(repo, plan, build_hunk_map(hunks), diff_text)

        assert exc_info.value.commit_index == 2
        assert "Failed to apply commit 2" in str(exc_info.value)
        # The first commit stays
        assert git(repo, "log", "-1", "--format=%s").strip() == "Update app"

    def test_dry_run_changes_nothing(self, feature_branch):
        """Test a dry run validates without committing."""
        repo, base_sha, diff_text, hunks = feature_branch
        plan = CommitPlan(
            commits=[PlannedCommit(message="All", hunk_ids=[h.id for h in hunks])]
        )

        shas = execute_plan(repo, plan, build_hunk_map(hunks), diff_text, dry_run=True)

        assert shas == []
        assert git(repo, "rev-parse", "HEAD").strip() == base_sha
        assert git(repo, "status", "--porcelain") == ""

    def test_debug_writes_commit_patches(self, feature_branch, tmp_path):
        """Test debug mode writes one NNN.patch per commit."""
        repo, base_sha, diff_text, hunks = feature_branch
        debug_dir = tmp_path / "debug"
        config = EngineConfig(debug=True, debug_dir=str(debug_dir))
        plan = CommitPlan(
            commits=[
                PlannedCommit(message="Update app", hunk_ids=_ids(hunks, "app.txt")),
                PlannedCommit(message="Add notes", hunk_ids=_ids(hunks, "notes.md")),
            ]
        )

        execute_plan(repo, plan, build_hunk_map(hunks), diff_text, config=config, dry_run=True)

        assert sorted(p.name for p in debug_dir.iterdir()) == ["001.patch", "002.patch"]
        assert "notes.md" in (debug_dir / "002.patch").read_text()


class TestCheckPlanHunks:
    """Tests for check_plan_hunks function."""

    def test_all_known(self, feature_branch):
        """Test a plan with known IDs passes."""
        _, _, _, hunks = feature_branch
        plan = CommitPlan(commits=[PlannedCommit(message="x", hunk_ids=[hunks[0].id])])

        check_plan_hunks(plan, build_hunk_map(hunks))

    def test_names_first_bad_commit(self, feature_branch):
        """Test the error names the commit holding the unknown ID."""
        _, _, _, hunks = feature_branch
        plan = CommitPlan(
            commits=[
                PlannedCommit(message="ok", hunk_ids=[hunks[0].id]),
                PlannedCommit(message="bad", hunk_ids=["missing.txt:1-1"]),
            ]
        )

        with pytest.raises(PlanExecutionError) as exc_info:
            check_plan_hunks(plan, build_hunk_map(hunks))

        assert exc_info.value.commit_index == 2
        assert "missing.txt:1-1" in exc_info.value.reason
