"""
Side-by-side text rendering of parsed diffs.

The output is plain fixed-width text (old file on the left, new file on the right)
meant to be embedded in a chat message or a Markdown code block.
"""

from dataclasses import dataclass
from itertools import zip_longest
from typing import List, Optional, Sequence, Tuple

from hunkview.diff.models import ChangeKind, DiffLine, FileDiff, ParsedDiff

COLUMN_SEPARATOR = " │ "
ELLIPSIS = "…"
MARKER_WIDTH = 2

LinePair = Tuple[Optional[DiffLine], Optional[DiffLine]]


@dataclass(frozen=True)
class FormatOptions:
    total_width: int = 80
    show_line_numbers: bool = True


def pair_lines(lines: Sequence[DiffLine]) -> List[LinePair]:
    """
    Groups the lines of a hunk into (old column, new column) rows.

    Context lines sit on both sides of the same row. A run of deleted lines
    followed by a run of added lines is treated as one replacement block and the
    two runs are zipped together, the shorter side padded with None.
    """
    pairs: List[LinePair] = []
    index = 0

    while index < len(lines):
        line = lines[index]
        if line.change_kind is ChangeKind.CONTEXT:
            pairs.append((line, line))
            index += 1
            continue

        deleted: List[DiffLine] = []
        while index < len(lines) and lines[index].change_kind is ChangeKind.DELETED:
            deleted.append(lines[index])
            index += 1

        added: List[DiffLine] = []
        while index < len(lines) and lines[index].change_kind is ChangeKind.ADDED:
            added.append(lines[index])
            index += 1

        pairs.extend(zip_longest(deleted, added))

    return pairs


class SideBySideFormatter:
    """Renders ParsedDiff values as two aligned text columns."""

    def __init__(self, options: Optional[FormatOptions] = None):
        self.options = options or FormatOptions()
        self.line_number_width = 4 if self.options.show_line_numbers else 0
        number_column_width = (self.line_number_width + 1) if self.options.show_line_numbers else 0
        # At least one character of content, even for very small widths
        self.content_width = max(
            self.options.total_width - self.line_number_width - MARKER_WIDTH - 1, 1
        )
        self.column_width = number_column_width + MARKER_WIDTH + self.content_width

    def format(self, diffs: ParsedDiff) -> str:
        return "\n".join(self.format_file_diff(file_diff) for file_diff in diffs)

    def format_file_diff(self, file_diff: FileDiff) -> str:
        width = self.column_width
        lines = [
            "",
            f"File: {file_diff.path}",
            "=" * (width * 2 + 3),
            _center("Old", width) + COLUMN_SEPARATOR + _center("New", width),
            "─" * width + "─┼─" + "─" * width,
        ]

        for hunk_index, hunk in enumerate(file_diff.hunks):
            if hunk_index > 0:
                lines.append(" " * width + COLUMN_SEPARATOR + " " * width)
            for old_line, new_line in pair_lines(hunk.lines):
                lines.append(self.format_line_pair(old_line, new_line))

        return "\n".join(line.rstrip() for line in lines)

    def format_line_pair(
        self, old_line: Optional[DiffLine], new_line: Optional[DiffLine]
    ) -> str:
        return (
            self.format_column(old_line, is_old=True)
            + COLUMN_SEPARATOR
            + self.format_column(new_line, is_old=False)
        )

    def format_column(self, line: Optional[DiffLine], is_old: bool) -> str:
        if line is None:
            return " " * self.column_width

        number_text = ""
        if self.options.show_line_numbers:
            number = line.old_line_number if is_old else line.new_line_number
            if number is None:
                number_text = " " * (self.line_number_width + 1)
            else:
                number_text = f"{number:>{self.line_number_width}} "

        if is_old and line.change_kind is ChangeKind.DELETED:
            marker = "- "
        elif not is_old and line.change_kind is ChangeKind.ADDED:
            marker = "+ "
        else:
            marker = "  "

        return number_text + marker + self.fit_content(line.content)

    def fit_content(self, content: str) -> str:
        """Truncates with an ellipsis or pads so the text is exactly content_width long."""
        if len(content) > self.content_width:
            return content[: self.content_width - 1] + ELLIPSIS
        return content.ljust(self.content_width)


def _center(text: str, width: int) -> str:
    padding = max(0, width - len(text))
    left = padding // 2
    return " " * left + text + " " * (padding - left)


def format_side_by_side(diffs: ParsedDiff, options: Optional[FormatOptions] = None) -> str:
    """Renders every file of a parsed diff, one block per file."""
    return SideBySideFormatter(options).format(diffs)
