"""Data model for a parsed set of file changes."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

_FILE_HEADER_ROWS = 1


class FileStatus(enum.Enum):
    """How a file changed between the two sides of a diff."""

    ADDED = "A"
    DELETED = "D"
    MODIFIED = "M"
    RENAMED = "R"
    COPIED = "C"

    def marker(self) -> str:
        """Single-letter marker shown next to the file name."""
        return self.value


class DiffLineKind(enum.Enum):
    """The role of a single line inside a hunk."""

    CONTEXT = enum.auto()
    ADDED = enum.auto()
    REMOVED = enum.auto()
    META = enum.auto()


@dataclass
class DiffLine:
    """One line of a hunk with its line numbers on each side."""

    kind: DiffLineKind
    old_line: int | None
    new_line: int | None
    content: str


@dataclass
class DiffHunk:
    """A contiguous block of changes introduced by an ``@@`` header."""

    header: str
    old_start: int = 0
    old_lines: int = 0
    new_start: int = 0
    new_lines: int = 0
    lines: list[DiffLine] = field(default_factory=list)


@dataclass
class DiffFile:
    """All changes made to one file."""

    id: str
    old_path: str = ""
    path: str = ""
    status: FileStatus = FileStatus.MODIFIED
    additions: int = 0
    deletions: int = 0
    hunks: list[DiffHunk] = field(default_factory=list)
    binary: bool = False

    def display_path(self) -> str:
        """The new path, or the old one when the new path is empty."""
        return self.path or self.old_path

    def line_count(self) -> int:
        """Number of unwrapped rows needed to show this file."""
        if self.binary or not self.hunks:
            return _FILE_HEADER_ROWS + 1
        return _FILE_HEADER_ROWS + sum(len(hunk.lines) + 1 for hunk in self.hunks)


@dataclass
class Changeset:
    """A titled collection of changed files."""

    title: str = ""
    source_label: str = ""
    files: list[DiffFile] = field(default_factory=list)