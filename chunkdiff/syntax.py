"""Line-by-line syntax highlighting of diff content."""

from __future__ import annotations

from collections import deque
from pathlib import PurePosixPath

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, get_lexer_for_filename
from pygments.token import (
    Comment,
    Error,
    Generic,
    Keyword,
    Literal,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    Token,
    _TokenType,
)
from pygments.util import ClassNotFound

from chunkdiff.styled import Color, Indexed, NamedColor, Rgb, Span, Style
from chunkdiff.theme import SyntaxPalette

# Preceding lines re-lexed with each new line so that multi-line constructs
# such as block comments and strings keep their colours.
_CONTEXT_LINES = 64

_LEXER_OPTIONS = {"stripnl": False, "ensurenl": False}

_TOML_CANDIDATES = ("toml", "ini", "yaml", "json")
_KNOWN_EXTENSIONS: dict[str, tuple[str, ...]] = {
    "rs": ("rust",),
    "js": ("javascript",),
    "jsx": ("javascript",),
    "mjs": ("javascript",),
    "cjs": ("javascript",),
    "ts": ("typescript", "javascript"),
    "tsx": ("typescript", "javascript"),
    "mts": ("typescript", "javascript"),
    "cts": ("typescript", "javascript"),
    "json": ("json",),
    "jsonc": ("json",),
    "md": ("markdown",),
    "markdown": ("markdown",),
    "sh": ("bash",),
    "bash": ("bash",),
    "zsh": ("bash",),
    "toml": _TOML_CANDIDATES,
}

_TOKEN_CLASSES: dict[_TokenType, str] = {
    Token: "foreground",
    Comment: "comment",
    Comment.Special: "doc_comment",
    String: "string",
    String.Doc: "doc_comment",
    String.Escape: "escape",
    String.Regex: "regex",
    Literal: "constant",
    Number: "constant",
    Keyword: "keyword",
    Keyword.Constant: "constant",
    Operator: "operator",
    Punctuation: "punctuation",
    Name.Builtin: "support",
    Name.Builtin.Pseudo: "constant",
    Name.Class: "type_name",
    Name.Exception: "type_name",
    Name.Constant: "constant",
    Name.Decorator: "macro_call",
    Name.Function: "function",
    Name.Function.Magic: "macro_call",
    Name.Namespace: "namespace",
    Name.Variable: "variable",
    Name.Attribute: "attribute",
    Name.Property: "property",
    Name.Tag: "tag",
    Name.Label: "label",
    Name.Entity: "constant",
    Generic.Heading: "markup",
    Generic.Subheading: "markup",
    Generic.Strong: "markup",
    Generic.Emph: "constant",
    Generic.Error: "invalid",
    Error: "invalid",
}

_NAMED_RGB: dict[NamedColor, tuple[int, int, int]] = {
    NamedColor.RESET: (0xEB, 0xDB, 0xB2),
    NamedColor.BLACK: (0x00, 0x00, 0x00),
    NamedColor.RED: (0x80, 0x00, 0x00),
    NamedColor.GREEN: (0x00, 0x80, 0x00),
    NamedColor.YELLOW: (0x80, 0x80, 0x00),
    NamedColor.BLUE: (0x00, 0x00, 0x80),
    NamedColor.MAGENTA: (0x80, 0x00, 0x80),
    NamedColor.CYAN: (0x00, 0x80, 0x80),
    NamedColor.GRAY: (0xC0, 0xC0, 0xC0),
    NamedColor.DARK_GRAY: (0x80, 0x80, 0x80),
    NamedColor.LIGHT_RED: (0xFF, 0x00, 0x00),
    NamedColor.LIGHT_GREEN: (0x00, 0xFF, 0x00),
    NamedColor.LIGHT_YELLOW: (0xFF, 0xFF, 0x00),
    NamedColor.LIGHT_BLUE: (0x00, 0x00, 0xFF),
    NamedColor.LIGHT_MAGENTA: (0xFF, 0x00, 0xFF),
    NamedColor.LIGHT_CYAN: (0x00, 0xFF, 0xFF),
    NamedColor.WHITE: (0xFF, 0xFF, 0xFF),
}

_ANSI_RGB: tuple[tuple[int, int, int], ...] = (
    (0x00, 0x00, 0x00),
    (0x80, 0x00, 0x00),
    (0x00, 0x80, 0x00),
    (0x80, 0x80, 0x00),
    (0x00, 0x00, 0x80),
    (0x80, 0x00, 0x80),
    (0x00, 0x80, 0x80),
    (0xC0, 0xC0, 0xC0),
    (0x80, 0x80, 0x80),
    (0xFF, 0x00, 0x00),
    (0x00, 0xFF, 0x00),
    (0xFF, 0xFF, 0x00),
    (0x00, 0x00, 0xFF),
    (0xFF, 0x00, 0xFF),
    (0x00, 0xFF, 0xFF),
    (0xFF, 0xFF, 0xFF),
)


class SyntaxHighlighter:
    """Highlights successive lines of one file, keeping context between them."""

    def __init__(self, lexer: Lexer | None, palette: SyntaxPalette) -> None:
        self._lexer = lexer
        self._palette = palette
        self._history: deque[str] = deque(maxlen=_CONTEXT_LINES)
        self._colors: dict[_TokenType, Color] = {}

    @classmethod
    def for_path(cls, path: str, palette: SyntaxPalette) -> SyntaxHighlighter:
        """A highlighter for the language of ``path``, or a plain one."""
        return cls(_lexer_for_path(path), palette)

    def is_enabled(self) -> bool:
        """Whether a language was recognised for the path."""
        return self._lexer is not None

    def highlight_line(self, content: str, base_style: Style) -> list[Span]:
        """Split a line into spans coloured by token class over ``base_style``."""
        if self._lexer is None:
            return [Span(content, base_style)]

        prefix = "".join(f"{line}\n" for line in self._history)
        text = f"{prefix}{content}\n"
        start, end = len(prefix), len(prefix) + len(content)
        spans = []
        for index, token, value in self._lexer.get_tokens_unprocessed(text):
            low, high = max(index, start), min(index + len(value), end)
            if low < high:
                spans.append(Span(text[low:high], base_style.with_fg(self._color(token))))
        self._history.append(content)
        return spans

    def advance_line(self, content: str) -> None:
        """Feed a line through without producing output."""
        if self._lexer is not None:
            self._history.append(content)

    def _color(self, token: _TokenType) -> Color:
        color = self._colors.get(token)
        if color is None:
            kind = token
            while kind not in _TOKEN_CLASSES and kind.parent is not None:
                kind = kind.parent
            field_name = _TOKEN_CLASSES.get(kind, "foreground")
            color = Rgb(*rgb(getattr(self._palette, field_name)))
            self._colors[token] = color
        return color


def syntax_name_for_path(path: str) -> str | None:
    """Name of the language recognised for ``path``, if any."""
    lexer = _lexer_for_path(path)
    return None if lexer is None else lexer.name


def _lexer_for_path(path: str) -> Lexer | None:
    path = path.strip()
    try:
        return get_lexer_for_filename(path, **_LEXER_OPTIONS)
    except ClassNotFound:
        return _lexer_for_known_path(path)


def _lexer_for_known_path(path: str) -> Lexer | None:
    pure = PurePosixPath(path)
    file_name = (pure.name or path).lower()
    extension = pure.suffix[1:].lower() if pure.suffix else None

    candidates = _KNOWN_EXTENSIONS.get(extension or "")
    if candidates is None and file_name == "cargo.lock":
        candidates = _TOML_CANDIDATES
    for alias in candidates or ():
        try:
            return get_lexer_by_name(alias, **_LEXER_OPTIONS)
        except ClassNotFound:
            continue
    return None


def rgb(color: Color) -> tuple[int, int, int]:
    """Red, green and blue components of any colour."""
    if isinstance(color, Rgb):
        return color.r, color.g, color.b
    if isinstance(color, Indexed):
        return indexed_rgb(color.index)
    return _NAMED_RGB[color]


def indexed_rgb(index: int) -> tuple[int, int, int]:
    """Components of a colour in the 256-colour terminal palette."""
    if not 0 <= index <= 255:
        raise ValueError(f"colour index out of range: {index}")
    if index < 16:
        return _ANSI_RGB[index]
    if index < 232:
        value = index - 16
        return (
            _xterm_level(value // 36),
            _xterm_level((value % 36) // 6),
            _xterm_level(value % 6),
        )
    grey = 8 + (index - 232) * 10
    return grey, grey, grey


def _xterm_level(value: int) -> int:
    return 0 if value == 0 else 55 + value * 40