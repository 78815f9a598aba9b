"""
Unified diff parser.

Turns the text produced by ``git diff`` (or the ``diff_hunk`` field of a GitHub
review comment, once it carries a file header) into immutable FileDiff / DiffHunk /
DiffLine objects. The parser never raises on malformed input: lines it does not
recognise are skipped and parsing resumes at the next marker it does.
"""

import re
from typing import List, Optional, Sequence, Tuple

from hunkview.core.logging_config import get_logger
from hunkview.diff.models import ChangeKind, DiffHunk, DiffLine, FileDiff, ParsedDiff

logger = get_logger(__name__)

FILE_HEADER_PREFIX = "diff --git"
HUNK_HEADER_PREFIX = "@@"
OLD_PATH_PREFIX = "---"
NEW_PATH_PREFIX = "+++"
NO_NEWLINE_MARKER = "\\"
BINARY_FILES_PREFIX = "Binary files"

FILE_HEADER_RE = re.compile(r"^diff --git a/(.*) b/(.*)$")
HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

LINE_MARKERS = {
    "-": ChangeKind.DELETED,
    "+": ChangeKind.ADDED,
    " ": ChangeKind.CONTEXT,
}


def parse_diff(diff_text: str) -> ParsedDiff:
    """
    Parses a unified diff into FileDiff objects, in the order the files appear.

    Args:
        diff_text: Raw patch text, one or more ``diff --git`` sections

    Returns:
        ParsedDiff: A tuple of FileDiff objects, possibly empty
    """
    raw_lines = diff_text.split("\n")
    if diff_text.endswith("\n"):
        # The final newline terminates the last line, it does not start an empty one
        raw_lines.pop()
    lines = tuple(raw_lines)
    file_diffs: List[FileDiff] = []

    index = 0
    while index < len(lines):
        if lines[index].startswith(FILE_HEADER_PREFIX):
            file_diff, index = _parse_file_diff(lines, index)
            if file_diff is not None:
                file_diffs.append(file_diff)
        else:
            index += 1

    return tuple(file_diffs)


def _is_file_header(line: str) -> bool:
    # A "diff --git" line without a/ and b/ paths neither opens nor closes a file.
    return line.startswith(FILE_HEADER_PREFIX) and FILE_HEADER_RE.match(line) is not None


def _parse_file_diff(
    lines: Sequence[str], index: int
) -> Tuple[Optional[FileDiff], int]:
    """Parses one file section starting at its ``diff --git`` line."""
    match = FILE_HEADER_RE.match(lines[index])
    if not match:
        logger.debug(f"Skipping malformed file header at line {index + 1}: {lines[index]!r}")
        return None, index + 1

    old_path, new_path = match.group(1), match.group(2)
    index += 1

    # Skip mode, index and rename lines
    while index < len(lines):
        line = lines[index]
        if line.startswith((OLD_PATH_PREFIX, NEW_PATH_PREFIX, HUNK_HEADER_PREFIX)):
            break
        if _is_file_header(line):
            # Binary or metadata-only change
            return FileDiff(old_path=old_path, new_path=new_path), index
        index += 1

    if index < len(lines) and lines[index].startswith(OLD_PATH_PREFIX):
        index += 1
    if index < len(lines) and lines[index].startswith(NEW_PATH_PREFIX):
        index += 1

    hunks: List[DiffHunk] = []
    while index < len(lines):
        line = lines[index]
        if line.startswith(HUNK_HEADER_PREFIX):
            hunk, index = _parse_hunk(lines, index)
            if hunk is not None:
                hunks.append(hunk)
        elif _is_file_header(line):
            break
        else:
            index += 1

    return FileDiff(old_path=old_path, new_path=new_path, hunks=tuple(hunks)), index


def _parse_hunk(lines: Sequence[str], index: int) -> Tuple[Optional[DiffHunk], int]:
    """Parses one hunk starting at its ``@@`` header line."""
    match = HUNK_HEADER_RE.match(lines[index])
    if not match:
        logger.debug(f"Skipping malformed hunk header at line {index + 1}: {lines[index]!r}")
        return None, index + 1

    old_start = int(match.group(1))
    old_count = int(match.group(2)) if match.group(2) is not None else 1
    new_start = int(match.group(3))
    new_count = int(match.group(4)) if match.group(4) is not None else 1
    index += 1

    diff_lines: List[DiffLine] = []
    old_line_number = old_start
    new_line_number = new_start

    while index < len(lines):
        line = lines[index]
        if line.startswith(HUNK_HEADER_PREFIX) or _is_file_header(line):
            break
        index += 1

        if line.startswith((FILE_HEADER_PREFIX, NO_NEWLINE_MARKER, BINARY_FILES_PREFIX)):
            continue

        change_kind = LINE_MARKERS.get(line[:1])
        if change_kind is None:
            # Context line that lost its leading space in transit
            change_kind, content = ChangeKind.CONTEXT, line
        else:
            content = line[1:]

        if change_kind is ChangeKind.DELETED:
            diff_lines.append(DiffLine(old_line_number, None, change_kind, content))
            old_line_number += 1
        elif change_kind is ChangeKind.ADDED:
            diff_lines.append(DiffLine(None, new_line_number, change_kind, content))
            new_line_number += 1
        else:
            diff_lines.append(DiffLine(old_line_number, new_line_number, change_kind, content))
            old_line_number += 1
            new_line_number += 1

    hunk = DiffHunk(
        old_start=old_start,
        old_count=old_count,
        new_start=new_start,
        new_count=new_count,
        lines=tuple(diff_lines),
    )
    return hunk, index
