"""Transactional hunk application for the hunksplit engine.

Applies a chosen subset of hunks to the index and working tree of a checkout.
Each dependency group is its own transaction: its state is snapshotted first
and restored completely if the group cannot be applied.

Per group, an atomic strategy (one patch for the whole group) is tried first,
then a sequential strategy (one patch per hunk in dependency order). Every
single patch is applied with 'git apply --index', falling back to
'git apply --cached' followed by a checkout of the affected paths.

Contains:
- GroupResult: Outcome of one applied group
- ApplyResult: Outcome of one apply call
- HunkApplicator: Applies hunks against one repository
- apply_hunks: Convenience wrapper around HunkApplicator.apply
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from hunksplit.config import EngineConfig
from hunksplit.engine.exceptions import (
    ApplyFailure,
    PatchGenerationError,
    UnknownHunkIDError,
)
from hunksplit.engine.grouping import create_dependency_groups, order_group
from hunksplit.engine.models import Hunk
from hunksplit.engine.patch import (
    create_hunk_patch,
    extract_files_from_patch,
    is_file_deletion,
    is_pure_deletion,
)
from hunksplit.engine.snapshot import (
    create_snapshot,
    restore_snapshot,
    write_temp_patch,
)
from hunksplit.engine.validation import validate_hunk_combination, validate_patch_format
from hunksplit.git.apply import ApplyMode, apply_patch_file, checkout_index

_logger = logging.getLogger(__name__)

STRATEGY_ATOMIC = "atomic"
STRATEGY_SEQUENTIAL = "sequential"


@dataclass
class GroupResult:
    """Outcome of one successfully applied dependency group."""

    index: int  # 1-based
    hunk_ids: list[str]
    strategy: str


@dataclass
class ApplyResult:
    """Outcome of one apply call."""

    groups: list[GroupResult] = field(default_factory=list)

    @property
    def hunks_applied(self) -> int:
        return sum(len(group.hunk_ids) for group in self.groups)


class HunkApplicator:
    """Applies subsets of parsed hunks to one repository checkout.

    The checkout is treated as an exclusively owned resource for the
    duration of an apply call; no locking is done here.
    """

    def __init__(
        self,
        repo_root: Path,
        config: Optional[EngineConfig] = None,
        logger: Optional[logging.Logger] = None,
        debug_dir: Optional[Path] = None,
    ):
        self.repo_root = repo_root
        self.config = config or EngineConfig()
        self.logger = logger or _logger
        if debug_dir is None and self.config.debug:
            debug_dir = self.config.resolve_debug_dir(repo_root)
        self.debug_dir = debug_dir

    def apply(
        self, hunk_ids: list[str], hunk_map: dict[str, Hunk], diff_text: str
    ) -> ApplyResult:
        """Apply the given hunks group by group.

        Args:
            hunk_ids: IDs of the hunks to apply
            hunk_map: All hunks parsed from ``diff_text``, by ID
            diff_text: The diff the hunks were parsed from

        Returns:
            ApplyResult describing every applied group

        Raises:
            UnknownHunkIDError: If an ID is not in ``hunk_map`` (nothing applied)
            OverlapError: If two chosen hunks intersect (nothing applied)
            PatchGenerationError: If a group produced no patch text
            ApplyFailure: If a group failed; earlier groups stay applied
        """
        result = ApplyResult()
        if not hunk_ids:
            return result

        hunks: list[Hunk] = []
        for hunk_id in hunk_ids:
            hunk = hunk_map.get(hunk_id)
            if hunk is None:
                raise UnknownHunkIDError(hunk_id)
            hunks.append(hunk)

        validate_hunk_combination(hunks)

        groups = create_dependency_groups(hunks)
        self._log_groups(groups)

        for index, group in enumerate(groups, start=1):
            self.logger.debug(
                "Applying group %d/%d (%d hunks)...", index, len(groups), len(group)
            )
            strategy = self._apply_group(index, group, diff_text)
            result.groups.append(GroupResult(index, [h.id for h in group], strategy))
            self.logger.debug("Group %d applied successfully (%s)", index, strategy)

        return result

    def _log_groups(self, groups: list[list[Hunk]]) -> None:
        self.logger.debug("Dependency analysis: %d groups identified", len(groups))
        for index, group in enumerate(groups, start=1):
            self.logger.debug("  Group %d: %d hunks", index, len(group))
            for hunk in group:
                self.logger.debug(
                    "    - %s (%s, deps: %d, dependents: %d)",
                    hunk.id,
                    hunk.change_type.value,
                    len(hunk.dependencies),
                    len(hunk.dependents),
                )

    def _apply_group(self, index: int, group: list[Hunk], diff_text: str) -> str:
        """Apply one group as a transaction and return the strategy used."""
        group_patch = create_hunk_patch(group, diff_text)
        if not group_patch.strip():
            raise PatchGenerationError(f"No patch content generated for group {index}")
        self._write_debug_patch(index, group_patch)

        snapshot = create_snapshot(self.repo_root, extract_files_from_patch(group_patch))

        if self._apply_patch(group_patch):
            return STRATEGY_ATOMIC

        if len(group) > 1:
            self.logger.debug("Atomic application failed, trying sequential with smart ordering...")
            restore_snapshot(self.repo_root, snapshot, self.logger)
            try:
                if self._apply_sequentially(group, diff_text):
                    return STRATEGY_SEQUENTIAL
            except PatchGenerationError:
                restore_snapshot(self.repo_root, snapshot, self.logger)
                raise

        self.logger.debug("Failed to apply group %d, restoring state...", index)
        restore_snapshot(self.repo_root, snapshot, self.logger)
        raise ApplyFailure(index, [h.id for h in group])

    def _apply_sequentially(self, group: list[Hunk], diff_text: str) -> bool:
        ordered = order_group(group, self.logger)
        for position, hunk in enumerate(ordered, start=1):
            patch = create_hunk_patch([hunk], diff_text)
            if not patch.strip():
                raise PatchGenerationError(f"Could not generate a patch for hunk {hunk.id}")
            if not self._apply_patch(patch):
                self.logger.debug(
                    "Failed to apply hunk %s (%d/%d) via git apply",
                    hunk.id,
                    position,
                    len(ordered),
                )
                return False
        return True

    def _apply_patch(self, patch_text: str) -> bool:
        """Apply one patch to index and working tree, undoing it on failure."""
        if not validate_patch_format(patch_text):
            self.logger.debug("Patch failed format validation, not applying")
            return False

        paths = extract_files_from_patch(patch_text)
        snapshot = create_snapshot(self.repo_root, paths)

        patch_file = write_temp_patch(patch_text)
        if patch_file is None:
            self.logger.debug("Patch file validation failed")
            restore_snapshot(self.repo_root, snapshot, self.logger)
            return False

        try:
            result = apply_patch_file(self.repo_root, patch_file, ApplyMode.INDEX)
            if result.returncode == 0:
                self.logger.debug("Patch applied via git apply --index")
                self._check_integrity(paths, patch_text)
                return True

            self.logger.debug("git apply --index failed: %s", result.stderr.strip())
            restore_snapshot(self.repo_root, snapshot, self.logger)

            result = apply_patch_file(self.repo_root, patch_file, ApplyMode.CACHED)
            if result.returncode != 0:
                self.logger.debug("git apply --cached also failed: %s", result.stderr.strip())
                restore_snapshot(self.repo_root, snapshot, self.logger)
                return False

            self.logger.debug("Patch applied to staging area, syncing working tree...")
            if not self._sync_from_index(paths, patch_text):
                self.logger.debug("Failed to sync working tree from index")
                restore_snapshot(self.repo_root, snapshot, self.logger)
                return False

            self._check_integrity(paths, patch_text)
            return True
        finally:
            patch_file.unlink(missing_ok=True)

    def _sync_from_index(self, paths: list[str], patch_text: str) -> bool:
        """Make the working tree match the index for ``paths``.

        Files the patch deletes are no longer in the index and are removed.
        """
        to_checkout: list[str] = []
        for path in paths:
            full_path = self.repo_root / path
            if is_file_deletion(patch_text, path):
                if full_path.exists():
                    full_path.unlink()
                continue
            to_checkout.append(path)

        if not to_checkout:
            return True
        return checkout_index(self.repo_root, to_checkout)

    def _check_integrity(self, paths: list[str], patch_text: str) -> int:
        """Warn about files that are missing or empty after a successful apply.

        Returns:
            Number of potential issues found (never turns success into failure)
        """
        issues = 0
        for path in paths:
            if is_pure_deletion(patch_text, path):
                continue
            full_path = self.repo_root / path
            if not full_path.exists():
                self.logger.warning("Integrity warning: %s does not exist after apply", path)
                issues += 1
            elif full_path.stat().st_size == 0:
                self.logger.warning("Integrity warning: %s is unexpectedly empty", path)
                issues += 1

        if issues:
            self.logger.warning(
                "Working tree integrity check: %d potential issues found out of %d files",
                issues,
                len(paths),
            )
        return issues

    def _write_debug_patch(self, index: int, patch_text: str) -> None:
        if self.debug_dir is None:
            return
        try:
            self.debug_dir.mkdir(parents=True, exist_ok=True)
            patch_path = self.debug_dir / f"{index:03d}.patch"
            patch_path.write_text(patch_text)
            self.logger.debug("[debug] Patch written to %s", patch_path)
        except OSError as e:
            self.logger.debug("Could not write debug patch: %s", e)


def apply_hunks(
    repo_root: Path,
    hunk_ids: list[str],
    hunk_map: dict[str, Hunk],
    diff_text: str,
    config: Optional[EngineConfig] = None,
    logger: Optional[logging.Logger] = None,
) -> ApplyResult:
    """Apply hunks to ``repo_root``; see HunkApplicator.apply."""
    applicator = HunkApplicator(repo_root, config=config, logger=logger)
    return applicator.apply(hunk_ids, hunk_map, diff_text)
