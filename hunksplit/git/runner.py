"""Git command runner and repository utilities.

Every call runs inside an explicit repository root. The engine never relies
on the process working directory to locate the checkout.

Contains:
- run_git: Run a git command and return the completed process
- _run_git_command: Run a git command and return its output, raising on failure
- get_repo_root: Get the root directory of a git repository
"""

import subprocess
from pathlib import Path
from typing import Optional

from hunksplit.git.exceptions import GitError


def run_git(
    args: list[str], repo_root: Path, input_text: Optional[str] = None
) -> subprocess.CompletedProcess:
    """Run a git command without raising on a nonzero exit code.

    Args:
        args: List of arguments to pass to git.
        repo_root: Repository root used as the working directory.
        input_text: Optional text fed to the command on stdin.

    Returns:
        The completed process with stdout and stderr captured as text.

    Raises:
        GitError: If git is not installed.
    """
    try:
        return subprocess.run(
            ["git"] + args,
            input=input_text,
            capture_output=True,
            text=True,
            cwd=repo_root,
        )
    except FileNotFoundError:
        raise GitError("Git is not installed or not in PATH.")


def _run_git_command(args: list[str], repo_root: Path) -> str:
    """Run a git command and return its output.

    Args:
        args: List of arguments to pass to git.
        repo_root: Repository root used as the working directory.

    Returns:
        The stdout of the git command, stripped.

    Raises:
        GitError: If the command fails.
    """
    try:
        result = subprocess.run(
            ["git"] + args,
            capture_output=True,
            text=True,
            check=True,
            cwd=repo_root,
        )
        return result.stdout.strip()
    except subprocess.CalledProcessError as e:
        raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr.strip()}")
    except FileNotFoundError:
        raise GitError("Git is not installed or not in PATH.")


def get_repo_root(path: Optional[Path] = None) -> Path:
    """Get the root directory of the git repository containing ``path``.

    Args:
        path: Directory to start from. Defaults to the current directory.

    Returns:
        Path to the repository root.

    Raises:
        GitError: If not in a git repository.
    """
    start = path if path is not None else Path.cwd()
    try:
        root = _run_git_command(["rev-parse", "--show-toplevel"], start)
        return Path(root)
    except GitError:
        raise GitError("Not in a git repository. Please run this command from within a git repo.")
