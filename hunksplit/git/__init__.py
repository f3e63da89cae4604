"""Git collaborator for hunksplit.

Every function takes an explicit repository root and runs git as a blocking
subprocess with stdout and stderr captured.

This package provides:
- exceptions: GitError
- runner: run_git, _run_git_command, get_repo_root
- diff: get_cached_diff, get_diff_against
- apply: ApplyMode, apply_patch_file, checkout_index, reset_index
- status: StagingStatus, get_staging_status
- commit: create_commit
- branch: get_current_branch, branch_exists, create_backup_branch, reset_hard
"""

# Exceptions
from hunksplit.git.exceptions import (
    GitError,
)

# Runner utilities
from hunksplit.git.runner import (
    _run_git_command,
    get_repo_root,
    run_git,
)

# Diff utilities
from hunksplit.git.diff import (
    get_cached_diff,
    get_diff_against,
)

# Apply primitives
from hunksplit.git.apply import (
    ApplyMode,
    apply_patch_file,
    checkout_index,
    reset_index,
)

# Status utilities
from hunksplit.git.status import (
    StagingStatus,
    get_staging_status,
)

# Commit utilities
from hunksplit.git.commit import (
    create_commit,
)

# Branch utilities
from hunksplit.git.branch import (
    branch_exists,
    create_backup_branch,
    get_current_branch,
    reset_hard,
)


__all__ = [
    # Exceptions
    "GitError",
    # Runner
    "run_git",
    "_run_git_command",
    "get_repo_root",
    # Diff
    "get_cached_diff",
    "get_diff_against",
    # Apply
    "ApplyMode",
    "apply_patch_file",
    "checkout_index",
    "reset_index",
    # Status
    "StagingStatus",
    "get_staging_status",
    # Commit
    "create_commit",
    # Branch
    "get_current_branch",
    "branch_exists",
    "create_backup_branch",
    "reset_hard",
]
