"""Git diff utilities.

Contains:
- get_cached_diff: Get the staged diff as text
- get_diff_against: Get the diff of the working tree against a base ref
"""

from pathlib import Path

from hunksplit.git.exceptions import GitError
from hunksplit.git.runner import run_git


def get_cached_diff(repo_root: Path) -> str:
    """Get the staged diff exactly as git prints it.

    The output is returned unstripped so it can be re-applied byte-for-byte.

    Args:
        repo_root: Repository root path.

    Returns:
        The staged diff text (empty string when nothing is staged).

    Raises:
        GitError: If git diff fails.
    """
    result = run_git(["diff", "--cached", "--binary"], repo_root)
    if result.returncode != 0:
        raise GitError(f"Failed to read staged diff: {result.stderr.strip()}")
    return result.stdout


def get_diff_against(repo_root: Path, base_ref: str) -> str:
    """Get the diff between ``base_ref`` and the working tree.

    Args:
        repo_root: Repository root path.
        base_ref: Branch, tag or commit to diff against.

    Returns:
        Unified diff text.

    Raises:
        GitError: If git diff fails.
    """
    result = run_git(["diff", "--minimal", base_ref], repo_root)
    if result.returncode != 0:
        raise GitError(f"Failed to diff against {base_ref}: {result.stderr.strip()}")
    return result.stdout
