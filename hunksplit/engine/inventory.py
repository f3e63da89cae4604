"""Hunk inventory and preview formatting for the hunksplit engine.

Contains:
- preview_hunk_application: Describe which hunks would be applied, per file
- format_hunk_inventory: Readable listing of parsed hunks
- group_summary: One line per dependency group
"""

from collections import defaultdict

from hunksplit.engine.models import Hunk


def preview_hunk_application(hunk_ids: list[str], hunk_map: dict[str, Hunk]) -> str:
    """Describe which hunks would be applied.

    Files appear in order of first mention and hunks are sorted by start
    line. Unknown IDs are skipped.

    Args:
        hunk_ids: IDs of the hunks to preview
        hunk_map: Mapping of hunk ID to Hunk

    Returns:
        Preview text, or "No hunks selected." for an empty selection
    """
    if not hunk_ids:
        return "No hunks selected."

    files_affected: dict[str, list[Hunk]] = defaultdict(list)
    for hunk_id in hunk_ids:
        hunk = hunk_map.get(hunk_id)
        if hunk is not None:
            files_affected[hunk.file_path].append(hunk)

    lines = []
    for file_path, hunks in files_affected.items():
        lines.append(f"File: {file_path}")
        for hunk in sorted(hunks, key=lambda h: h.start_line):
            lines.append(f"  - {hunk.id} ({hunk.line_range})")
        lines.append("")

    return "\n".join(lines)


def format_hunk_inventory(hunks: list[Hunk], show_context: bool = False) -> str:
    """Format parsed hunks for display.

    Args:
        hunks: Hunks in diff order
        show_context: Include each hunk's numbered source context

    Returns:
        Formatted inventory text
    """
    lines = ["[HUNK INVENTORY]"]
    current_file = None

    for hunk in hunks:
        if hunk.file_path != current_file:
            current_file = hunk.file_path
            lines.append(f"\nFile: {current_file}")
            if hunk.is_new_file:
                lines.append("  (new file)")

        additions, deletions = hunk.count_changes()
        lines.append(
            f"  Hunk {hunk.id}: {hunk.change_type.value} (+{additions} -{deletions})"
        )
        if hunk.dependencies:
            lines.append(f"    depends on: {', '.join(sorted(hunk.dependencies))}")
        if show_context and hunk.context:
            for context_line in hunk.context.split("\n"):
                lines.append(f"    {context_line}")

    return "\n".join(lines)


def group_summary(groups: list[list[Hunk]]) -> str:
    """Summarize dependency groups, one line per group."""
    if not groups:
        return "No dependency groups."

    lines = []
    for index, group in enumerate(groups, start=1):
        noun = "hunk" if len(group) == 1 else "hunks"
        ids = ", ".join(hunk.id for hunk in group)
        lines.append(f"Group {index} ({len(group)} {noun}): {ids}")
    return "\n".join(lines)
