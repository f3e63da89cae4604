"""Git branch utilities.

Contains:
- get_current_branch: Get the current branch name
- branch_exists: Check whether a local branch exists
- create_backup_branch: Point a timestamped backup branch at HEAD
- reset_hard: Reset index and working tree to a ref
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from hunksplit.git.exceptions import GitError
from hunksplit.git.runner import _run_git_command, run_git


def get_current_branch(repo_root: Path) -> str:
    """Get the current branch name.

    Returns:
        The branch name, or "HEAD" when detached.
    """
    return _run_git_command(["rev-parse", "--abbrev-ref", "HEAD"], repo_root)


def branch_exists(repo_root: Path, branch_name: str) -> bool:
    """Check whether a local branch exists."""
    result = run_git(["branch", "--list", branch_name], repo_root)
    return result.returncode == 0 and bool(result.stdout.strip())


def create_backup_branch(repo_root: Path, now: Optional[datetime] = None) -> str:
    """Create a backup branch pointing at the current HEAD.

    The branch is named ``backup/<current-branch>-HH-MM-SS``.

    Args:
        repo_root: Repository root path
        now: Timestamp override (for tests)

    Returns:
        Name of the backup branch

    Raises:
        GitError: If the branch cannot be created
    """
    current = get_current_branch(repo_root)
    stamp = (now or datetime.now()).strftime("%H-%M-%S")
    backup_name = f"backup/{current}-{stamp}"

    try:
        _run_git_command(["branch", "--force", backup_name], repo_root)
    except GitError as e:
        raise GitError(f"Failed to create backup branch: {e}")

    return backup_name


def reset_hard(repo_root: Path, ref: str) -> None:
    """Reset index and working tree to ``ref``.

    Raises:
        GitError: If git reset fails
    """
    _run_git_command(["reset", "--hard", "--quiet", ref], repo_root)
