"""Git status utilities.

Contains:
- StagingStatus: Staged and modified paths
- get_staging_status: Split porcelain status into staged and modified paths
"""

from dataclasses import dataclass, field
from pathlib import Path

from hunksplit.git.runner import run_git


@dataclass
class StagingStatus:
    """Paths with staged changes and paths with unstaged modifications."""

    staged: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.staged and not self.modified


def get_staging_status(repo_root: Path) -> StagingStatus:
    """Get the current staging status.

    The porcelain format uses two columns:
    - First column: staged status (index)
    - Second column: worktree status

    Untracked files ('?') count as neither.

    Returns:
        StagingStatus with staged and modified paths. Empty on git failure.
    """
    result = run_git(["status", "--porcelain=v1"], repo_root)
    status = StagingStatus()
    if result.returncode != 0:
        return status

    for line in result.stdout.split("\n"):
        if len(line) < 4:
            continue
        index_col, worktree_col = line[0], line[1]
        path = line[3:]
        if index_col not in (" ", "?"):
            status.staged.append(path)
        if worktree_col not in (" ", "?"):
            status.modified.append(path)

    return status
