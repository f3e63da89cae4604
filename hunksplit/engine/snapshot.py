"""Staging-area and working-tree snapshots for rollback.

Contains:
- RepoSnapshot: Saved staged diff plus saved file contents for some paths
- create_snapshot: Capture the current state for a set of paths
- restore_staging: Reset the index and re-apply a saved staged diff
- restore_working_tree: Rewrite saved files and remove files that were absent
- restore_snapshot: Restore both parts of a snapshot
- write_temp_patch: Write patch text to a temporary file and verify it
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from hunksplit.git.apply import ApplyMode, apply_patch_file, reset_index
from hunksplit.git.diff import get_cached_diff

_logger = logging.getLogger(__name__)


@dataclass
class RepoSnapshot:
    """State of the index and of selected working-tree files."""

    staged_patch: str
    # Path -> file bytes, or None when the file did not exist
    files: dict[str, Optional[bytes]] = field(default_factory=dict)

    @property
    def paths(self) -> list[str]:
        return list(self.files)


def create_snapshot(repo_root: Path, paths: list[str]) -> RepoSnapshot:
    """Capture the staged diff and the on-disk content of ``paths``.

    Args:
        repo_root: Repository root path
        paths: Paths relative to the repository root

    Returns:
        RepoSnapshot

    Raises:
        GitError: If the staged diff cannot be read
    """
    files: dict[str, Optional[bytes]] = {}
    for path in paths:
        full_path = repo_root / path
        files[path] = full_path.read_bytes() if full_path.is_file() else None

    return RepoSnapshot(staged_patch=get_cached_diff(repo_root), files=files)


def write_temp_patch(patch_text: str, prefix: str = "hunksplit-") -> Optional[Path]:
    """Write patch text to a temporary file and verify it by re-reading.

    Args:
        patch_text: Patch content
        prefix: Temporary file name prefix

    Returns:
        Path of the written file, or None if it could not be written or the
        re-read content differs (the file is removed in that case)
    """
    expected = patch_text.encode("utf-8")
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=".patch")
    path = Path(name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(expected)
            f.flush()
            os.fsync(f.fileno())
        if path.read_bytes() != expected:
            path.unlink(missing_ok=True)
            return None
    except OSError:
        path.unlink(missing_ok=True)
        return None
    return path


def restore_staging(
    repo_root: Path, staged_patch: str, logger: Optional[logging.Logger] = None
) -> bool:
    """Reset the index to HEAD and re-apply a saved staged diff.

    Args:
        repo_root: Repository root path
        staged_patch: Output of 'git diff --cached' captured earlier
        logger: Logger for diagnostics

    Returns:
        True if the index was restored
    """
    logger = logger or _logger

    if not reset_index(repo_root):
        logger.warning("Failed to reset index while restoring staging state")
        return False

    if not staged_patch.strip():
        return True

    patch_file = write_temp_patch(staged_patch, prefix="hunksplit-staging-")
    if patch_file is None:
        logger.warning("Could not write staged diff for restoration")
        return False
    try:
        result = apply_patch_file(repo_root, patch_file, ApplyMode.CACHED)
    finally:
        patch_file.unlink(missing_ok=True)

    if result.returncode != 0:
        logger.warning("Could not restore staged changes: %s", result.stderr.strip())
        return False
    return True


def restore_working_tree(
    repo_root: Path,
    files: dict[str, Optional[bytes]],
    logger: Optional[logging.Logger] = None,
) -> bool:
    """Rewrite saved files byte-for-byte and remove files that were absent.

    Args:
        repo_root: Repository root path
        files: Saved contents from a snapshot
        logger: Logger for diagnostics

    Returns:
        True if every path was restored
    """
    logger = logger or _logger
    restored = 0
    failed = 0

    for path, content in files.items():
        full_path = repo_root / path
        try:
            if content is None:
                if full_path.exists():
                    full_path.unlink()
                    logger.debug("Removed file that did not exist before: %s", path)
                continue

            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_bytes(content)
            if full_path.read_bytes() != content:
                logger.warning("Restored content of %s does not match the snapshot", path)
                failed += 1
                continue
            restored += 1
        except OSError as e:
            logger.warning("Could not restore %s: %s", path, e)
            failed += 1

    logger.debug(
        "Working tree restoration: %d restored, %d failed out of %d files",
        restored,
        failed,
        len(files),
    )
    return failed == 0


def restore_snapshot(
    repo_root: Path, snapshot: RepoSnapshot, logger: Optional[logging.Logger] = None
) -> bool:
    """Restore the working-tree files, then the index, of a snapshot.

    Returns:
        True if both parts were restored
    """
    tree_ok = restore_working_tree(repo_root, snapshot.files, logger)
    staging_ok = restore_staging(repo_root, snapshot.staged_patch, logger)
    return tree_ok and staging_ok
