"""Patch reconstruction for the hunksplit engine.

Builds a patch containing only chosen hunks by reassembling verbatim blocks
of the original diff. Hunk bodies are never regenerated from parsed fields.

Contains:
- extract_original_hunks: Map hunk ID to its verbatim block in the diff
- extract_original_headers: Map file path to its verbatim header lines
- create_hunk_patch: Build a minimal patch for a subset of hunks
- extract_files_from_patch: List the files a patch touches
- is_file_deletion: Check whether a patch deletes a file
- is_pure_deletion: Check whether a patch only removes lines from a file
"""

from collections import defaultdict

from hunksplit.engine.models import Hunk, count_changes
from hunksplit.engine.parser import (
    parse_file_header,
    parse_hunk_header,
    split_diff_lines,
    strip_diff_prefix,
    unquote_diff_path,
)


def extract_original_hunks(diff_text: str) -> dict[str, str]:
    """Extract each hunk's text exactly as it appears in the diff.

    Args:
        diff_text: The full diff the hunks were parsed from

    Returns:
        Dictionary mapping hunk ID to the @@ line plus body, joined by newlines
    """
    hunks_map: dict[str, str] = {}
    lines = split_diff_lines(diff_text)
    current_file = None
    i = 0

    while i < len(lines):
        line = lines[i]

        if line.startswith("diff --git"):
            current_file = parse_file_header(line)
        elif line.startswith("@@") and current_file is not None:
            header = parse_hunk_header(line)
            if header is not None:
                _, _, new_start, new_count = header
                end_line = new_start + max(0, new_count - 1)
                hunk_id = f"{current_file}:{new_start}-{end_line}"

                hunk_lines = [line]
                i += 1
                while i < len(lines):
                    next_line = lines[i]
                    if next_line.startswith("diff --git") or next_line.startswith("@@"):
                        break
                    hunk_lines.append(next_line)
                    i += 1

                hunks_map[hunk_id] = "\n".join(hunk_lines)
                continue

        i += 1

    return hunks_map


def extract_original_headers(diff_text: str) -> dict[str, list[str]]:
    """Extract each file's header block (from 'diff --git' to the first @@).

    Args:
        diff_text: The full diff

    Returns:
        Dictionary mapping file path to header lines, in diff order
    """
    headers: dict[str, list[str]] = {}
    lines = split_diff_lines(diff_text)
    i = 0

    while i < len(lines):
        line = lines[i]
        if line.startswith("diff --git"):
            file_path = parse_file_header(line)
            if file_path is not None:
                header_lines = [line]
                i += 1
                while i < len(lines) and not lines[i].startswith("@@"):
                    if lines[i].startswith("diff --git"):
                        break
                    header_lines.append(lines[i])
                    i += 1
                headers.setdefault(file_path, header_lines)
                continue
        i += 1

    return headers


def _synthesize_header(file_path: str, is_new_file: bool) -> list[str]:
    """Minimal valid header for a file whose original header is unknown."""
    lines = [f"diff --git a/{file_path} b/{file_path}"]
    if is_new_file:
        lines.extend([
            "new file mode 100644",
            "index 0000000..0000000",
            "--- /dev/null",
            f"+++ b/{file_path}",
        ])
    else:
        lines.extend([
            f"--- a/{file_path}",
            f"+++ b/{file_path}",
        ])
    return lines


def create_hunk_patch(hunks: list[Hunk], diff_text: str) -> str:
    """Build a patch containing exactly the given hunks.

    Files keep the order they have in the original diff and hunks within a
    file are sorted by start line. Each hunk and file header is copied
    verbatim from ``diff_text``; a header is synthesized only for a file the
    diff has no header for.

    Args:
        hunks: Hunks to include
        diff_text: The diff the hunks were parsed from

    Returns:
        Patch text ending in exactly one newline, or "" for no hunks
    """
    if not hunks:
        return ""

    original_hunks = extract_original_hunks(diff_text)
    original_headers = extract_original_headers(diff_text)

    hunks_by_file: dict[str, list[Hunk]] = defaultdict(list)
    for hunk in hunks:
        hunks_by_file[hunk.file_path].append(hunk)

    file_order = [path for path in original_headers if path in hunks_by_file]
    file_order += sorted(path for path in hunks_by_file if path not in original_headers)

    patch_parts: list[str] = []
    for file_path in file_order:
        file_hunks = sorted(hunks_by_file[file_path], key=lambda h: h.start_line)

        if file_path in original_headers:
            patch_parts.extend(original_headers[file_path])
        else:
            is_new_file = all(h.is_new_file for h in file_hunks)
            patch_parts.extend(_synthesize_header(file_path, is_new_file))

        for hunk in file_hunks:
            patch_parts.append(original_hunks.get(hunk.id, hunk.content))

    patch = "\n".join(patch_parts).rstrip("\n")
    if not patch:
        return ""
    return patch + "\n"


def extract_files_from_patch(patch_text: str) -> list[str]:
    """List the files a patch touches, in order of first mention.

    Paths come from 'diff --git' lines and '+++' lines (except /dev/null),
    unquoted and with any single-letter prefix removed. Paths may contain
    spaces.
    """
    files: dict[str, None] = {}
    for line in patch_text.split("\n"):
        if line.startswith("diff --git"):
            file_path = parse_file_header(line)
            if file_path is not None:
                files[file_path] = None
        elif line.startswith("+++ "):
            # git ends names containing spaces with a tab; plain diffs put a
            # timestamp after it
            raw_path = line[4:].split("\t", 1)[0]
            if raw_path and raw_path != "/dev/null":
                files[strip_diff_prefix(unquote_diff_path(raw_path))] = None
    return list(files)


def _file_sections(patch_text: str) -> dict[str, str]:
    sections: dict[str, list[str]] = {}
    current = None
    for line in patch_text.split("\n"):
        if line.startswith("diff --git"):
            current = parse_file_header(line)
            if current is not None:
                sections.setdefault(current, [])
        if current is not None:
            sections[current].append(line)
    return {path: "\n".join(lines) for path, lines in sections.items()}


def is_file_deletion(patch_text: str, file_path: str) -> bool:
    """Check whether the patch removes ``file_path`` entirely."""
    section = _file_sections(patch_text).get(file_path)
    return section is not None and "\ndeleted file mode" in section


def is_pure_deletion(patch_text: str, file_path: str) -> bool:
    """Check whether the patch only removes content from ``file_path``.

    A 'deleted file mode' header or a section with deletions and no
    additions counts as a pure deletion.
    """
    section = _file_sections(patch_text).get(file_path)
    if section is None:
        return False
    if "\ndeleted file mode" in section:
        return True
    additions, deletions = count_changes(section)
    return additions == 0 and deletions > 0
