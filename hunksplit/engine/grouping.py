"""Dependency grouping and ordering for the hunksplit engine.

Contains:
- create_dependency_groups: Partition hunks into connected components
- topological_sort_hunks: Order one group by its in-group dependency edges
- fallback_order: Deterministic (file path, start line) ordering
- order_group: Topological order with the deterministic fallback on cycles
"""

import logging
from collections import deque
from typing import Optional

from hunksplit.engine.models import Hunk

_logger = logging.getLogger(__name__)


def create_dependency_groups(hunks: list[Hunk]) -> list[list[Hunk]]:
    """Group hunks that must be applied together.

    A group is a connected component over dependencies and dependents,
    restricted to the given hunks. Seeds are hunks with no ungrouped
    dependency; when a cycle leaves none, the first remaining hunk is used.

    Args:
        hunks: Hunks to partition

    Returns:
        List of non-empty groups; every hunk appears in exactly one group.
        Seeds and members follow input order.
    """
    hunk_map = {hunk.id: hunk for hunk in hunks}
    position = {hunk.id: index for index, hunk in enumerate(hunks)}
    ungrouped = dict.fromkeys(hunk_map)  # insertion-ordered set

    groups: list[list[Hunk]] = []

    while ungrouped:
        seed: Optional[str] = None
        for hunk_id in ungrouped:
            if not any(dep_id in ungrouped for dep_id in hunk_map[hunk_id].dependencies):
                seed = hunk_id
                break
        if seed is None:
            # Cycle across the remaining hunks
            seed = next(iter(ungrouped))

        current_group: set[str] = set()
        to_process = deque([seed])
        while to_process:
            current_id = to_process.popleft()
            if current_id not in ungrouped or current_id in current_group:
                continue
            current_group.add(current_id)

            hunk = hunk_map[current_id]
            for neighbour_id in sorted(hunk.dependents | hunk.dependencies):
                if neighbour_id in ungrouped and neighbour_id not in current_group:
                    to_process.append(neighbour_id)

        groups.append([hunk_map[hunk_id] for hunk_id in sorted(current_group, key=position.get)])
        for hunk_id in current_group:
            del ungrouped[hunk_id]

    return groups


def topological_sort_hunks(hunks: list[Hunk]) -> Optional[list[Hunk]]:
    """Sort hunks so each comes after its in-group dependencies (Kahn).

    Args:
        hunks: One dependency group

    Returns:
        Ordered hunks, or None if the in-group edges contain a cycle
    """
    hunk_map = {hunk.id: hunk for hunk in hunks}

    in_degree = {
        hunk.id: sum(1 for dep_id in hunk.dependencies if dep_id in hunk_map)
        for hunk in hunks
    }

    queue = deque(hunk.id for hunk in hunks if in_degree[hunk.id] == 0)
    result: list[Hunk] = []

    while queue:
        current_id = queue.popleft()
        current = hunk_map[current_id]
        result.append(current)

        for dependent_id in sorted(current.dependents):
            if dependent_id not in hunk_map:
                continue
            in_degree[dependent_id] -= 1
            if in_degree[dependent_id] == 0:
                queue.append(dependent_id)

    if len(result) != len(hunks):
        return None
    return result


def fallback_order(hunks: list[Hunk]) -> list[Hunk]:
    """Order hunks by file path, then start line."""
    return sorted(hunks, key=lambda h: (h.file_path, h.start_line))


def order_group(hunks: list[Hunk], logger: Optional[logging.Logger] = None) -> list[Hunk]:
    """Order a group for sequential application.

    Args:
        hunks: One dependency group
        logger: Logger for the cycle warning

    Returns:
        Topological order, or fallback_order when the group has a cycle
    """
    ordered = topological_sort_hunks(hunks)
    if ordered is None:
        (logger or _logger).warning("Cyclic dependencies detected, using fallback ordering")
        return fallback_order(hunks)
    return ordered
