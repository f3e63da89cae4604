"""Validation helpers for the hunksplit engine.

Contains:
- validate_hunk_combination: Reject hunks with intersecting ranges in a file
- validate_patch_format: Basic structural check of patch text
"""

from collections import defaultdict

from hunksplit.engine.exceptions import OverlapError
from hunksplit.engine.models import Hunk


def validate_hunk_combination(hunks: list[Hunk]) -> None:
    """Check that a set of hunks can be applied together.

    Per file, hunks are sorted by start line and any hunk whose end line
    reaches the next hunk's start line is rejected.

    Args:
        hunks: Hunks chosen for one application

    Raises:
        OverlapError: If two hunks in the same file intersect
    """
    hunks_by_file: dict[str, list[Hunk]] = defaultdict(list)
    for hunk in hunks:
        hunks_by_file[hunk.file_path].append(hunk)

    for file_path, file_hunks in hunks_by_file.items():
        file_hunks = sorted(file_hunks, key=lambda h: h.start_line)
        for current, following in zip(file_hunks, file_hunks[1:]):
            if current.end_line >= following.start_line:
                raise OverlapError(file_path, current.id, following.id)


def validate_patch_format(patch_text: str) -> bool:
    """Check that patch text looks like a git patch.

    Requires at least one 'diff --git' line, at least one @@ line, and every
    @@ line to carry two @@ markers and both a '-' and a '+' range.

    Args:
        patch_text: Patch to check

    Returns:
        True if the patch is well formed
    """
    if not patch_text.strip():
        return False

    lines = patch_text.split("\n")
    if not any(line.startswith("diff --git") for line in lines):
        return False

    hunk_headers = [line for line in lines if line.startswith("@@")]
    if not hunk_headers:
        return False

    for header in hunk_headers:
        if header.count("@@") < 2:
            return False
        if "-" not in header or "+" not in header:
            return False

    return True
