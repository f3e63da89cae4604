"""Diff parser for the hunksplit engine.

Contains functions for turning unified diff text into Hunk records:
- parse_diff: Parse a (multi-file) unified diff into hunks
- parse_file_header: Extract the post-change path from a 'diff --git' line
- parse_hunk_header: Decode the numeric fields of an @@ line
- strip_diff_prefix: Remove a single-letter a/ b/ c/ w/ i/ o/ prefix
- unquote_diff_path: Decode a C-quoted path
- build_hunk_map: Index hunks by ID
"""

import logging
import re
from pathlib import Path
from typing import Optional

from hunksplit.config import EngineConfig
from hunksplit.engine.dependencies import analyze_dependencies
from hunksplit.engine.exceptions import ParseError
from hunksplit.engine.models import Hunk, classify_change

_logger = logging.getLogger(__name__)

# A C-quoted path, as git writes names with special characters
_QUOTED_PATH = r'"(?:[^"\\]|\\.)*"'
# diff --git a/path b/path, c/path w/path, or path path (diff.noprefix)
_FILE_HEADER_RE = re.compile(
    rf"^diff --git\s+({_QUOTED_PATH}|\S+)\s+({_QUOTED_PATH}|\S+)$"
)
# Fallback for paths containing spaces with the default prefixes
_FILE_HEADER_SPACES_RE = re.compile(r"^diff --git [a-z]/(.*) [a-z]/(.*)$")
# Fields are captured loosely so that non-numeric values can be reported
_HUNK_HEADER_RE = re.compile(r"^@@ -(\S+?)(?:,(\S+?))? \+(\S+?)(?:,(\S+?))? @@")


def split_diff_lines(diff_text: str) -> list[str]:
    """Split diff text into lines, dropping the artifact of a final newline."""
    lines = diff_text.split("\n")
    if diff_text.endswith("\n"):
        lines.pop()
    return lines


def strip_diff_prefix(path: str) -> str:
    """Remove a single-letter git diff prefix (a/, b/, c/, w/, i/, o/, ...).

    Args:
        path: Path as written in a diff header

    Returns:
        Path without the prefix, or unchanged if it has none
    """
    if len(path) > 2 and path[1] == "/":
        return path[2:]
    return path


_C_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "t": 0x09,
    "n": 0x0A,
    "v": 0x0B,
    "f": 0x0C,
    "r": 0x0D,
    '"': 0x22,
    "\\": 0x5C,
}
_OCTAL_ESCAPE_RE = re.compile(r"[0-7]{3}")


def unquote_diff_path(path: str) -> str:
    """Decode a path git wrote in C-quoted form ("a/caf\\303\\251.txt").

    Octal escapes are UTF-8 bytes. Unquoted paths are returned unchanged.
    """
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path

    body = path[1:-1]
    decoded = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            octal = _OCTAL_ESCAPE_RE.match(body, i + 1)
            if octal:
                decoded.append(int(octal.group(), 8))
                i += 4
                continue
            if body[i + 1] in _C_ESCAPES:
                decoded.append(_C_ESCAPES[body[i + 1]])
                i += 2
                continue
        decoded.extend(ch.encode("utf-8"))
        i += 1
    return decoded.decode("utf-8", errors="replace")


def parse_file_header(line: str) -> Optional[str]:
    """Extract the post-change ("b" side) path from a 'diff --git' line.

    Args:
        line: A line starting with 'diff --git'

    Returns:
        The unquoted, prefix-stripped path, or None if the line cannot be
        decoded
    """
    match = _FILE_HEADER_RE.match(line)
    if match:
        return strip_diff_prefix(unquote_diff_path(match.group(2)))
    match = _FILE_HEADER_SPACES_RE.match(line)
    if match:
        return match.group(2)
    return None


def parse_hunk_header(line: str) -> Optional[tuple[int, int, int, int]]:
    """Decode an @@ -old_start[,old_count] +new_start[,new_count] @@ line.

    A missing count means 1.

    Args:
        line: A line starting with '@@'

    Returns:
        Tuple of (old_start, old_count, new_start, new_count), or None if the
        line does not have the shape of a hunk header

    Raises:
        ParseError: If a numeric field is not an integer
    """
    match = _HUNK_HEADER_RE.match(line)
    if not match:
        return None

    values = []
    for raw in match.groups():
        if raw is None:
            values.append(1)
            continue
        try:
            values.append(int(raw))
        except ValueError:
            raise ParseError(f"Malformed hunk header field {raw!r} in: {line}")
    old_start, old_count, new_start, new_count = values
    return old_start, old_count, new_start, new_count


def _is_content_line(line: str) -> bool:
    return bool(line) and line[0] in "+- "


def _collect_hunk_lines(
    lines: list[str], start: int, logger: logging.Logger
) -> tuple[list[str], int]:
    """Collect an @@ line and its body up to the next file or hunk header.

    A '\\ No newline at end of file' marker is kept only when it directly
    follows a content line; otherwise the upstream patch is malformed and the
    marker is dropped.

    Returns:
        Tuple of (hunk lines including the header, index of the next line)
    """
    hunk_lines = [lines[start]]
    i = start + 1
    while i < len(lines):
        line = lines[i]
        if line.startswith("diff --git") or line.startswith("@@"):
            break
        if line.startswith("\\") and "No newline" in line:
            if len(hunk_lines) > 1 and _is_content_line(hunk_lines[-1]):
                hunk_lines.append(line)
            elif len(hunk_lines) > 1:
                logger.debug(
                    "Skipping suspicious 'No newline' marker after non-content line: %s",
                    hunk_lines[-1],
                )
            else:
                logger.debug("Skipping 'No newline' marker in hunk with insufficient content")
            i += 1
            continue
        hunk_lines.append(line)
        i += 1
    return hunk_lines, i


def get_hunk_context(
    file_path: str,
    start_line: int,
    end_line: int,
    context_lines: int,
    repo_root: Optional[Path] = None,
) -> str:
    """Build numbered source lines around a hunk from the file on disk.

    Lines inside the hunk range are marked with '>>> '. Purely informational:
    an unreadable file yields a one-line placeholder.
    """
    path = (repo_root or Path.cwd()) / file_path
    try:
        file_lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError:
        return f"File: {file_path} (lines {start_line}-{end_line})"

    context_start = max(0, start_line - context_lines - 1)
    context_end = min(len(file_lines), end_line + context_lines)

    numbered: list[str] = []
    for index in range(context_start, context_end):
        line_num = index + 1
        prefix = ">>> " if start_line <= line_num <= end_line else "    "
        numbered.append(f"{prefix}{line_num:4d}: {file_lines[index]}")
    return "\n".join(numbered)


def parse_diff(
    diff_text: str,
    config: Optional[EngineConfig] = None,
    repo_root: Optional[Path] = None,
    logger: Optional[logging.Logger] = None,
) -> list[Hunk]:
    """Parse unified diff text into hunks with populated dependency edges.

    Args:
        diff_text: Full unified diff, possibly spanning many files
        config: Engine settings (context size and dependency thresholds)
        repo_root: Directory the diff paths are relative to, used only to
                   read hunk context; defaults to the current directory
        logger: Logger for diagnostics

    Returns:
        Hunks in diff order

    Raises:
        ParseError: If a hunk header has a non-numeric field, or two hunks
                    share the same file and range
    """
    config = config or EngineConfig()
    logger = logger or _logger

    hunks: list[Hunk] = []
    seen_ids: set[str] = set()
    current_file: Optional[str] = None
    is_new_file = False

    lines = split_diff_lines(diff_text)
    i = 0
    while i < len(lines):
        line = lines[i]

        if line.startswith("diff --git"):
            current_file = parse_file_header(line)
            is_new_file = False
            if current_file is None:
                logger.debug("Could not decode file header, skipping its hunks: %s", line)
        elif line.startswith("new file mode"):
            is_new_file = True
        elif line.startswith("@@") and current_file is not None:
            header = parse_hunk_header(line)
            if header is None:
                logger.debug("Skipping line that is not a hunk header: %s", line)
                i += 1
                continue

            _, _, new_start, new_count = header
            hunk_lines, i = _collect_hunk_lines(lines, i, logger)
            content = "\n".join(hunk_lines)
            end_line = new_start + max(0, new_count - 1)

            hunk = Hunk(
                file_path=current_file,
                start_line=new_start,
                end_line=end_line,
                content=content,
                context=get_hunk_context(
                    current_file, new_start, end_line, config.context_lines, repo_root
                ),
                change_type=classify_change(content),
                is_new_file=is_new_file,
            )
            if hunk.id in seen_ids:
                raise ParseError(f"Duplicate hunk ID in diff: {hunk.id}")
            seen_ids.add(hunk.id)
            hunks.append(hunk)
            continue

        i += 1

    analyze_dependencies(hunks, config)
    logger.debug("Parsed %d hunks", len(hunks))
    return hunks


def build_hunk_map(hunks: list[Hunk]) -> dict[str, Hunk]:
    """Build a mapping of hunk IDs to Hunk objects.

    Args:
        hunks: Hunks from parse_diff

    Returns:
        Dictionary mapping hunk ID to Hunk
    """
    return {hunk.id: hunk for hunk in hunks}
