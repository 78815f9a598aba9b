"""
Unified diff parsing and side-by-side rendering.

``format_diff`` renders a full patch; ``format_diff_hunk`` renders the bare
``diff_hunk`` of a GitHub review comment, which has no ``diff --git`` header.
"""

from typing import Optional

from hunkview.diff.formatter import (
    FormatOptions,
    SideBySideFormatter,
    format_side_by_side,
    pair_lines,
)
from hunkview.diff.models import ChangeKind, DiffHunk, DiffLine, FileDiff, ParsedDiff
from hunkview.diff.parser import FILE_HEADER_PREFIX, parse_diff

UNKNOWN_PATH = "unknown"


def format_diff(diff_text: str, options: Optional[FormatOptions] = None) -> str:
    return format_side_by_side(parse_diff(diff_text), options)


def format_diff_hunk(
    diff_hunk: str, path: Optional[str] = None, options: Optional[FormatOptions] = None
) -> str:
    """
    Renders a review comment's diff hunk side by side.

    GitHub only sends the hunk itself, so a ``diff --git`` header naming ``path``
    is added when the text does not already contain one.
    """
    if not any(line.startswith(FILE_HEADER_PREFIX) for line in diff_hunk.split("\n")):
        path = path or UNKNOWN_PATH
        diff_hunk = f"{FILE_HEADER_PREFIX} a/{path} b/{path}\n{diff_hunk}"
    return format_diff(diff_hunk, options)


__all__ = [
    "ChangeKind",
    "DiffHunk",
    "DiffLine",
    "FileDiff",
    "FormatOptions",
    "ParsedDiff",
    "SideBySideFormatter",
    "format_diff",
    "format_diff_hunk",
    "format_side_by_side",
    "pair_lines",
    "parse_diff",
]
