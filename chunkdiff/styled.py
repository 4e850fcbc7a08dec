"""Styled text primitives and width-aware wrapping."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from itertools import groupby
from typing import NamedTuple, Union

from wcwidth import wcwidth

_TAB_REPLACEMENT = "  "
_WHITESPACE = frozenset(
    "\t\n\x0b\x0c\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)


class NamedColor(enum.Enum):
    """The basic terminal colours."""

    RESET = "reset"
    BLACK = "black"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"
    GRAY = "gray"
    DARK_GRAY = "dark_gray"
    LIGHT_RED = "light_red"
    LIGHT_GREEN = "light_green"
    LIGHT_YELLOW = "light_yellow"
    LIGHT_BLUE = "light_blue"
    LIGHT_MAGENTA = "light_magenta"
    LIGHT_CYAN = "light_cyan"
    WHITE = "white"


@dataclass(frozen=True)
class Rgb:
    """A 24-bit colour."""

    r: int
    g: int
    b: int


@dataclass(frozen=True)
class Indexed:
    """A colour from the 256-colour terminal palette."""

    index: int


Color = Union[NamedColor, Rgb, Indexed]


class Modifier(enum.Flag):
    """Text attributes that can be combined."""

    BOLD = enum.auto()
    DIM = enum.auto()
    ITALIC = enum.auto()
    UNDERLINED = enum.auto()
    SLOW_BLINK = enum.auto()
    RAPID_BLINK = enum.auto()
    REVERSED = enum.auto()
    HIDDEN = enum.auto()
    CROSSED_OUT = enum.auto()


_NO_MODIFIERS = Modifier(0)


@dataclass(frozen=True)
class Style:
    """Foreground, background and attributes of a piece of text."""

    fg: Color | None = None
    bg: Color | None = None
    modifiers: Modifier = _NO_MODIFIERS

    def with_fg(self, color: Color) -> Style:
        """A copy with the given foreground colour."""
        return replace(self, fg=color)

    def with_bg(self, color: Color) -> Style:
        """A copy with the given background colour."""
        return replace(self, bg=color)

    def add_modifier(self, modifier: Modifier) -> Style:
        """A copy with the given attributes added."""
        return replace(self, modifiers=self.modifiers | modifier)


@dataclass(frozen=True)
class Span:
    """A run of text in a single style."""

    content: str
    style: Style = Style()

    def width(self) -> int:
        """Display width of the text in terminal cells."""
        return display_width(self.content)


@dataclass
class Line:
    """A row of spans with a style applied to the whole row."""

    spans: list[Span] = field(default_factory=list)
    style: Style = Style()

    def width(self) -> int:
        """Display width of the row in terminal cells."""
        return sum(span.width() for span in self.spans)

    def text(self) -> str:
        """The row's text without styling."""
        return "".join(span.content for span in self.spans)


class _StyledChar(NamedTuple):
    value: str
    style: Style
    width: int


def char_display_width(value: str) -> int:
    """Width of one character in terminal cells; control characters take none."""
    return max(wcwidth(value), 0)


def display_width(text: str) -> int:
    """Width of a string in terminal cells."""
    return sum(char_display_width(value) for value in text)


def expand_tabs(text: str) -> str:
    """Replace each tab with two spaces."""
    return text.replace("\t", _TAB_REPLACEMENT)


def wrap_styled_spans(spans: Iterable[Span], max_width: int) -> list[list[Span]]:
    """Break spans into rows no wider than ``max_width``, keeping styles.

    Rows break after whitespace where possible. A character wider than the
    limit gets a row of its own. Empty input gives a single empty row.
    """
    max_width = max(max_width, 1)
    chars = [
        _StyledChar(value, span.style, char_display_width(value))
        for span in spans
        for value in span.content
    ]
    if not chars:
        return [[]]

    rows: list[list[Span]] = []
    start = 0
    while start < len(chars):
        end = _wrapped_row_end(chars, start, max_width)
        rows.append(_chars_to_spans(chars[start:end]))
        start = end
    return rows


def wrap_line(line: Line, content_width: int) -> list[Line]:
    """Wrap a line into rows of at most ``content_width`` cells."""
    return [
        Line(spans=row, style=line.style)
        for row in wrap_styled_spans(line.spans, max(content_width, 1))
    ]


def _wrapped_row_end(chars: list[_StyledChar], start: int, max_width: int) -> int:
    width = 0
    index = start
    last_break: int | None = None

    while index < len(chars):
        char_width = chars[index].width
        if width > 0 and width + char_width > max_width:
            break
        if width == 0 and char_width > max_width:
            return index + 1

        width += char_width
        index += 1
        if chars[index - 1].value in _WHITESPACE:
            last_break = index
        if width >= max_width:
            break

    if index >= len(chars):
        return len(chars)
    if last_break is not None and last_break > start:
        return last_break
    return max(index, start + 1)


def _chars_to_spans(chars: list[_StyledChar]) -> list[Span]:
    return [
        Span("".join(char.value for char in group), style)
        for style, group in groupby(chars, key=lambda char: char.style)
    ]