from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class ChangeKind(Enum):
    """Classification of a single line inside a hunk."""

    ADDED = "added"
    DELETED = "deleted"
    CONTEXT = "context"


@dataclass(frozen=True)
class DiffLine:
    """One physical line inside a hunk, with its marker stripped."""

    old_line_number: Optional[int]
    new_line_number: Optional[int]
    change_kind: ChangeKind
    content: str


@dataclass(frozen=True)
class DiffHunk:
    """A contiguous change region bounded by an @@ header."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: Tuple[DiffLine, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FileDiff:
    """Represents the changes to a single file."""

    old_path: str
    new_path: str
    hunks: Tuple[DiffHunk, ...] = field(default_factory=tuple)

    @property
    def path(self) -> str:
        return self.new_path or self.old_path


ParsedDiff = Tuple[FileDiff, ...]
