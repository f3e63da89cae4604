"""Git apply primitives used by the hunk applicator.

Contains:
- ApplyMode: Where a patch is applied (index + working tree, or index only)
- apply_patch_file: Apply a patch file with git apply
- checkout_index: Re-materialize paths from the index into the working tree
- reset_index: Reset the index to HEAD
"""

import subprocess
from enum import Enum
from pathlib import Path

from hunksplit.git.runner import run_git


class ApplyMode(Enum):
    """Target of a git apply invocation."""

    INDEX = "--index"  # index and working tree
    CACHED = "--cached"  # index only


def apply_patch_file(
    repo_root: Path, patch_file: Path, mode: ApplyMode = ApplyMode.INDEX
) -> subprocess.CompletedProcess:
    """Apply a patch file with ``git apply``.

    Args:
        repo_root: Repository root path
        patch_file: Path of the patch to apply
        mode: ApplyMode.INDEX updates both index and working tree,
              ApplyMode.CACHED updates only the index

    Returns:
        The completed git process (check returncode for success)
    """
    return run_git(
        ["apply", mode.value, "--whitespace=nowarn", str(patch_file)],
        repo_root,
    )


def checkout_index(repo_root: Path, paths: list[str]) -> bool:
    """Copy the indexed version of paths into the working tree.

    With no paths, every indexed file is checked out.

    Args:
        repo_root: Repository root path
        paths: Paths relative to the repository root

    Returns:
        True if every path was synced
    """
    if not paths:
        return run_git(["checkout-index", "-f", "-a"], repo_root).returncode == 0

    all_success = True
    for path in paths:
        result = run_git(["checkout-index", "-f", "--", path], repo_root)
        if result.returncode != 0:
            all_success = False
    return all_success


def reset_index(repo_root: Path) -> bool:
    """Reset the index to HEAD, keeping the working tree.

    Args:
        repo_root: Repository root path

    Returns:
        True on success
    """
    return run_git(["reset", "-q", "HEAD", "--"], repo_root).returncode == 0
