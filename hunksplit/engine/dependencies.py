"""Dependency analysis between hunks of the same diff.

Two independent heuristics add edges from a later hunk to an earlier hunk in
the same file:

- Line-shift: the earlier hunk changes the file length, or the two ranges
  overlap or come within ``adjacency_threshold`` lines of each other.
- Proximity: the two hunks start within ``proximity_threshold`` lines.

The result is a heuristic relation, not a guaranteed DAG; ordering code must
detect cycles.
"""

from collections import defaultdict
from typing import Optional

from hunksplit.config import EngineConfig
from hunksplit.engine.models import Hunk


def hunks_have_line_dependency(hunk: Hunk, other: Hunk, adjacency_threshold: int = 3) -> bool:
    """Check whether ``hunk``'s line numbers depend on ``other``.

    Args:
        hunk: The hunk whose position may shift
        other: The hunk that may shift it
        adjacency_threshold: Max gap between ranges still considered adjacent

    Returns:
        True if the hunks are line-shift dependent
    """
    if hunk.file_path != other.file_path:
        return False

    if other.start_line < hunk.start_line and other.net_line_delta != 0:
        return True

    overlaps = hunk.start_line <= other.end_line and hunk.end_line >= other.start_line
    adjacent = (
        abs(hunk.start_line - other.end_line) <= adjacency_threshold
        or abs(other.start_line - hunk.end_line) <= adjacency_threshold
    )
    return overlaps or adjacent


def analyze_dependencies(hunks: list[Hunk], config: Optional[EngineConfig] = None) -> None:
    """Populate ``dependencies``/``dependents`` for every same-file pair.

    Edges always point from the later-starting hunk to the earlier one.

    Args:
        hunks: Hunks of one diff (modified in place)
        config: Supplies the adjacency and proximity thresholds
    """
    config = config or EngineConfig()

    hunks_by_file: dict[str, list[Hunk]] = defaultdict(list)
    for hunk in hunks:
        hunks_by_file[hunk.file_path].append(hunk)

    for hunk in hunks:
        for other in hunks_by_file[hunk.file_path]:
            if other.id == hunk.id or other.start_line >= hunk.start_line:
                continue

            if hunks_have_line_dependency(hunk, other, config.adjacency_threshold):
                hunk.add_dependency(other)

            if hunk.start_line - other.start_line <= config.proximity_threshold:
                hunk.add_dependency(other)
