"""Git commit utilities.

Contains:
- create_commit: Commit the current index with a message
"""

from pathlib import Path

from hunksplit.git.exceptions import GitError
from hunksplit.git.runner import _run_git_command, run_git


def create_commit(repo_root: Path, message: str) -> str:
    """Create a commit from the current index.

    The message is passed on stdin so that multi-line messages survive intact.

    Args:
        repo_root: Repository root path
        message: Commit message

    Returns:
        SHA of the new commit

    Raises:
        GitError: If nothing is staged or git commit fails
    """
    staged = run_git(["diff", "--cached", "--name-only"], repo_root)
    if not staged.stdout.strip():
        raise GitError("Nothing staged to commit")

    result = run_git(["commit", "-F", "-"], repo_root, input_text=message)
    if result.returncode != 0:
        raise GitError(f"Failed to commit: {result.stderr.strip()}")

    return _run_git_command(["rev-parse", "HEAD"], repo_root)
