"""Exception classes for the hunksplit engine.

Contains:
- HunkSplitError: Base exception for engine errors
- ParseError: A hunk header could not be decoded
- UnknownHunkIDError: A requested hunk ID is not in the hunk map
- OverlapError: Two selected hunks cover intersecting line ranges
- PatchGenerationError: Hunks were supplied but no patch text was produced
- ApplyFailure: A dependency group could not be applied by any strategy
- PlanExecutionError: A planned commit could not be created
"""

from typing import Optional


class HunkSplitError(Exception):
    """Base exception for hunksplit engine errors."""

    pass


class ParseError(HunkSplitError):
    """Raised when diff text contains an undecodable hunk header."""

    pass


class UnknownHunkIDError(HunkSplitError):
    """Raised when a hunk ID is not present in the hunk map."""

    def __init__(self, hunk_id: str):
        self.hunk_id = hunk_id
        super().__init__(f"hunk ID not found: {hunk_id}")


class OverlapError(HunkSplitError):
    """Raised when two hunks in the same file have intersecting ranges."""

    def __init__(self, file_path: str, first_id: str, second_id: str):
        self.file_path = file_path
        self.first_id = first_id
        self.second_id = second_id
        super().__init__(f"overlapping hunks in {file_path}: {first_id} and {second_id}")


class PatchGenerationError(HunkSplitError):
    """Raised when hunks were supplied but the reconstructed patch is blank."""

    pass


class ApplyFailure(HunkSplitError):
    """Raised when a dependency group failed after every fallback."""

    def __init__(self, group_index: int, hunk_ids: list[str]):
        self.group_index = group_index
        self.hunk_ids = list(hunk_ids)
        super().__init__(
            f"failed to apply group {group_index} ({', '.join(self.hunk_ids)})"
        )


class PlanExecutionError(HunkSplitError):
    """Raised when a planned commit fails during plan execution."""

    def __init__(self, commit_index: int, reason: str, backup_ref: Optional[str] = None):
        self.commit_index = commit_index
        self.reason = reason
        self.backup_ref = backup_ref
        message = f"Failed to apply commit {commit_index}: {reason}"
        if backup_ref:
            message += f"\nYour original state is backed up in: {backup_ref}"
        super().__init__(message)
