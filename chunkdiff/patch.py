"""Parser for unified diffs in the format produced by ``git diff``."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from chunkdiff.model import (
    Changeset,
    DiffFile,
    DiffHunk,
    DiffLine,
    DiffLineKind,
    FileStatus,
)

_DEV_NULL = "/dev/null"
_PATH_PREFIXES = ("a/", "b/", "1/", "2/")
_U32_MAX = 0xFFFF_FFFF
_NUMBER = re.compile(r"\+?[0-9]+")


@dataclass(frozen=True)
class HunkRange:
    """Line ranges on both sides of a hunk header."""

    old_start: int = 0
    old_lines: int = 0
    new_start: int = 0
    new_lines: int = 0


def parse_unified_diff(text: str) -> Changeset:
    """Parse a multi-file unified diff into a changeset."""
    files: list[DiffFile] = []
    builder: _FileBuilder | None = None

    for line in _split_lines(text):
        header = parse_diff_git_line(line)
        if header is not None:
            builder = _FileBuilder(str(len(files)), *header)
            files.append(builder.file)
            continue
        if builder is not None:
            builder.push(line)

    return Changeset(files=files)


def parse_diff_git_line(line: str) -> tuple[str, str] | None:
    """Return the old and new paths of a ``diff --git`` line, if it is one."""
    if not line.startswith("diff --git "):
        return None
    parts = line[len("diff --git "):].split()
    if len(parts) < 2:
        return None
    return clean_git_path(parts[0]), clean_git_path(parts[1])


def clean_git_path(path: str) -> str:
    """Strip whitespace, quotes and a side prefix such as ``a/`` from a path."""
    unquoted = path.strip().strip('"')
    for prefix in _PATH_PREFIXES:
        if unquoted.startswith(prefix):
            return unquoted[len(prefix):]
    return unquoted


def parse_hunk_range(header: str) -> HunkRange | None:
    """Parse the ranges of an ``@@ -a,b +c,d @@`` header."""
    parts = header.split()
    if not parts or parts[0] != "@@" or len(parts) < 3:
        return None
    old_range = _parse_line_range(parts[1], "-")
    if old_range is None:
        return None
    new_range = _parse_line_range(parts[2], "+")
    if new_range is None:
        return None
    return HunkRange(*old_range, *new_range)


def _parse_line_range(text: str, sign: str) -> tuple[int, int] | None:
    if not text.startswith(sign):
        return None
    parts = text[1:].split(",")
    start = _parse_u32(parts[0])
    if start is None:
        return None
    if len(parts) == 1:
        return start, 1
    lines = _parse_u32(parts[1])
    if lines is None:
        return None
    return start, lines


def _parse_u32(text: str) -> int | None:
    if not _NUMBER.fullmatch(text):
        return None
    value = int(text)
    return value if value <= _U32_MAX else None


def _split_lines(text: str) -> Iterator[str]:
    *terminated, tail = text.split("\n")
    for line in terminated:
        yield line[:-1] if line.endswith("\r") else line
    if tail:
        yield tail


class _HunkCursor:
    """Appends lines to a hunk while tracking the next line numbers."""

    def __init__(self, hunk: DiffHunk) -> None:
        self.hunk = hunk
        self._next_old = hunk.old_start
        self._next_new = hunk.new_start

    def push(self, line: str) -> DiffLineKind:
        marker, content = line[:1], line[1:]
        if marker == "+":
            entry = DiffLine(DiffLineKind.ADDED, None, self._next_new, content)
            self._next_new += 1
        elif marker == "-":
            entry = DiffLine(DiffLineKind.REMOVED, self._next_old, None, content)
            self._next_old += 1
        elif marker == " ":
            entry = DiffLine(
                DiffLineKind.CONTEXT, self._next_old, self._next_new, content
            )
            self._next_old += 1
            self._next_new += 1
        else:
            entry = DiffLine(DiffLineKind.META, None, None, line)
        self.hunk.lines.append(entry)
        return entry.kind


class _FileBuilder:
    """Collects the metadata and hunks of one file section."""

    def __init__(self, file_id: str, old_path: str, path: str) -> None:
        self.file = DiffFile(id=file_id, old_path=old_path, path=path)
        self._cursor: _HunkCursor | None = None

    def push(self, line: str) -> None:
        if self._apply_metadata(line):
            return
        if line.startswith("@@ "):
            self._start_hunk(line)
            return
        if self._cursor is None:
            return
        kind = self._cursor.push(line)
        if kind is DiffLineKind.ADDED:
            self.file.additions += 1
        elif kind is DiffLineKind.REMOVED:
            self.file.deletions += 1

    def _start_hunk(self, header: str) -> None:
        bounds = parse_hunk_range(header) or HunkRange()
        hunk = DiffHunk(
            header=header,
            old_start=bounds.old_start,
            old_lines=bounds.old_lines,
            new_start=bounds.new_start,
            new_lines=bounds.new_lines,
        )
        self.file.hunks.append(hunk)
        self._cursor = _HunkCursor(hunk)

    def _apply_metadata(self, line: str) -> bool:
        file = self.file
        if line.startswith("new file mode "):
            file.status = FileStatus.ADDED
        elif line.startswith("deleted file mode "):
            file.status = FileStatus.DELETED
        elif line.startswith("copy from "):
            file.status = FileStatus.COPIED
            file.old_path = line.removeprefix("copy from ")
        elif line.startswith("copy to "):
            file.status = FileStatus.COPIED
            file.path = line.removeprefix("copy to ")
        elif line.startswith("rename from "):
            file.status = FileStatus.RENAMED
            file.old_path = line.removeprefix("rename from ")
        elif line.startswith("rename to "):
            file.status = FileStatus.RENAMED
            file.path = line.removeprefix("rename to ")
        elif line.startswith("Binary files "):
            file.binary = True
        elif line.startswith("--- "):
            cleaned = clean_git_path(line.removeprefix("--- "))
            if cleaned != _DEV_NULL:
                file.old_path = cleaned
        elif line.startswith("+++ "):
            cleaned = clean_git_path(line.removeprefix("+++ "))
            if cleaned != _DEV_NULL:
                file.path = cleaned
        else:
            return False
        return True