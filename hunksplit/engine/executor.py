"""Plan execution for the hunksplit engine.

Turns a CommitPlan into real commits: each planned commit's hunks are applied
through the transactional applicator and then committed.

Contains:
- check_plan_hunks: Verify every hunk ID in a plan exists
- write_debug_patch: Write a commit's patch into the debug directory
- execute_commit: Apply and commit one planned commit
- execute_plan: Execute every commit of a plan in order
"""

import logging
from pathlib import Path
from typing import Optional

from hunksplit.config import EngineConfig
from hunksplit.engine.applicator import HunkApplicator
from hunksplit.engine.exceptions import (
    HunkSplitError,
    PlanExecutionError,
    UnknownHunkIDError,
)
from hunksplit.engine.models import CommitPlan, Hunk, PlannedCommit
from hunksplit.engine.patch import create_hunk_patch
from hunksplit.git.apply import reset_index
from hunksplit.git.commit import create_commit
from hunksplit.git.exceptions import GitError

_logger = logging.getLogger(__name__)


def check_plan_hunks(
    plan: CommitPlan, hunk_map: dict[str, Hunk], backup_ref: Optional[str] = None
) -> None:
    """Verify that every hunk referenced by the plan exists.

    Raises:
        PlanExecutionError: Naming the first commit with an unknown hunk ID
    """
    for index, commit in enumerate(plan.commits, start=1):
        for hunk_id in commit.hunk_ids:
            if hunk_id not in hunk_map:
                raise PlanExecutionError(index, str(UnknownHunkIDError(hunk_id)), backup_ref)


def write_debug_patch(
    debug_dir: Path,
    index: int,
    commit: PlannedCommit,
    hunk_map: dict[str, Hunk],
    diff_text: str,
    logger: logging.Logger,
) -> Optional[Path]:
    """Write the reconstructed patch of one commit to ``debug_dir/NNN.patch``.

    Returns:
        Path of the written patch, or None if it could not be written
    """
    hunks = [hunk_map[hunk_id] for hunk_id in commit.hunk_ids]
    patch_path = debug_dir / f"{index:03d}.patch"
    try:
        debug_dir.mkdir(parents=True, exist_ok=True)
        patch_path.write_text(create_hunk_patch(hunks, diff_text))
    except OSError as e:
        logger.warning("Could not write debug patch %s: %s", patch_path, e)
        return None
    logger.debug("[debug] Patch for commit %d written to %s", index, patch_path)
    return patch_path


def execute_commit(
    repo_root: Path,
    commit: PlannedCommit,
    hunk_map: dict[str, Hunk],
    diff_text: str,
    applicator: HunkApplicator,
) -> str:
    """Apply one planned commit's hunks onto a clean index and commit them.

    Returns:
        SHA of the created commit

    Raises:
        GitError: If the index cannot be reset or the commit fails
        HunkSplitError: If the hunks cannot be applied
    """
    if not reset_index(repo_root):
        raise GitError("Failed to unstage changes")

    applicator.apply(commit.hunk_ids, hunk_map, diff_text)
    return create_commit(repo_root, commit.message)


def execute_plan(
    repo_root: Path,
    plan: CommitPlan,
    hunk_map: dict[str, Hunk],
    diff_text: str,
    config: Optional[EngineConfig] = None,
    logger: Optional[logging.Logger] = None,
    dry_run: bool = False,
    backup_ref: Optional[str] = None,
) -> list[str]:
    """Execute a commit plan against ``repo_root``.

    The caller is responsible for putting the checkout into the state the
    diff applies to (usually the base the diff was taken against).

    Args:
        repo_root: Repository root path
        plan: Commits to create, in order
        hunk_map: Hunks parsed from ``diff_text``
        diff_text: The diff the plan refers to
        config: Engine configuration
        logger: Logger for progress and diagnostics
        dry_run: Only validate (and with debug on, write patches)
        backup_ref: Ref to mention in errors so the user can recover

    Returns:
        SHAs of the created commits (empty for a dry run)

    Raises:
        PlanExecutionError: If any commit fails
    """
    config = config or EngineConfig()
    logger = logger or _logger
    debug_dir = config.resolve_debug_dir(repo_root) if config.debug else None

    check_plan_hunks(plan, hunk_map, backup_ref)

    if dry_run:
        for index, commit in enumerate(plan.commits, start=1):
            logger.info(
                "[dry-run] Commit %d: %s (%d hunks)",
                index,
                commit.message.splitlines()[0],
                len(commit.hunk_ids),
            )
            if debug_dir is not None:
                write_debug_patch(debug_dir, index, commit, hunk_map, diff_text, logger)
        return []

    # Patches are written per commit below, not per group
    applicator = HunkApplicator(
        repo_root, config=config.model_copy(update={"debug": False}), logger=logger
    )
    shas: list[str] = []

    for index, commit in enumerate(plan.commits, start=1):
        logger.info(
            "Applying commit %d/%d: %s",
            index,
            len(plan.commits),
            commit.message.splitlines()[0],
        )
        try:
            sha = execute_commit(repo_root, commit, hunk_map, diff_text, applicator)
        except (HunkSplitError, GitError) as e:
            raise PlanExecutionError(index, str(e), backup_ref) from e

        if debug_dir is not None:
            write_debug_patch(debug_dir, index, commit, hunk_map, diff_text, logger)
        shas.append(sha)
        logger.debug("Created commit %s", sha)

    return shas
