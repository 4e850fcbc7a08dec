"""Rendering of the review screen into rows of styled text."""

from __future__ import annotations

import os
from dataclasses import dataclass
from itertools import groupby
from operator import attrgetter

from chunkdiff.app import App, FocusPane, Rect, RenderedDiffLines
from chunkdiff.model import DiffFile, DiffHunk, DiffLine, DiffLineKind, FileStatus
from chunkdiff.styled import (
    Color,
    Line,
    Modifier,
    Span,
    Style,
    char_display_width,
    display_width,
    expand_tabs,
    wrap_line,
    wrap_styled_spans,
)
from chunkdiff.syntax import SyntaxHighlighter
from chunkdiff.theme import Theme

SIDEBAR_WIDTH = 34
MIN_SPLIT_WIDTH = 100
PANE_BORDER_WIDTH = 2
SIDEBAR_GUTTER_WIDTH = 4
DIFF_GUTTER_WIDTH = 11
RAIL_MARKER = "▌"
NO_TRACKED_CHANGES = "No tracked changes"
NO_DIFF_MESSAGE = "No diff to review. Make a tracked change, then run chunk diff."
THEME_ENV_VAR = "CHUNK_THEME"

HORIZONTAL = "horizontal"
VERTICAL = "vertical"

_NO_SELECTION = -1


def active_theme(name: str | None) -> Theme:
    """The theme called ``name``; the default theme for anything unknown."""
    if name == "github-dark":
        return Theme.github_dark()
    return Theme.matte_box()


def body_layout(area: Rect) -> tuple[str, int]:
    """Split direction and sidebar size for a screen area."""
    if area.width >= MIN_SPLIT_WIDTH:
        return HORIZONTAL, min(SIDEBAR_WIDTH, max(area.width - 40, 0))
    return VERTICAL, min(area.height, 9)


def draw(app: App, width: int, height: int, theme: Theme | None = None) -> list[Line]:
    """Render the whole screen; one line of exactly ``width`` cells per row."""
    if theme is None:
        theme = active_theme(os.environ.get(THEME_ENV_VAR))
    app.sidebar_area = None
    app.diff_area = None
    canvas = _Canvas(width, height)
    area = Rect(0, 0, width, height)
    canvas.fill_style(area, theme.base_style())

    sidebar, divider, diff = _split_body(area)
    _render_sidebar(canvas, sidebar, app, theme)
    canvas.fill_style(divider, Style(fg=theme.border, bg=theme.background))
    _render_diff(canvas, diff, app, theme)
    return canvas.lines()


def sidebar_lines(
    app: App, content_width: int, visible_height: int, theme: Theme
) -> list[Line]:
    """Visible sidebar rows, recording which file each row belongs to."""
    app.sidebar_row_indices.clear()
    files = app.changeset.files
    if not files:
        return [_muted_line(NO_TRACKED_CHANGES, theme)]

    _ensure_wrapped_sidebar_selection_visible(app, content_width, visible_height, theme)

    lines: list[Line] = []
    start = app.sidebar_scroll
    for index, file in enumerate(files[start:], start=start):
        entry = render_file_entry(
            index, file, app.selected_file_index, content_width, theme
        )
        for line in entry:
            if len(lines) >= visible_height:
                return lines
            app.sidebar_row_indices.append(index)
            lines.append(line)
    return lines


def render_file_entry(
    index: int, file: DiffFile, selected_index: int, content_width: int, theme: Theme
) -> list[Line]:
    """The wrapped sidebar rows of one file."""
    selected = index == selected_index
    background = theme.selected if selected else theme.background
    base = _color_style(theme.text, background)
    marker_style = _color_style(theme.accent, background) if selected else base
    status_style = _color_style(_status_color(file.status, theme), background)
    label = sidebar_file_label(file)
    stats = format_file_stats(file)
    stats_width = display_width(stats)
    used_width = SIDEBAR_GUTTER_WIDTH + display_width(label) + stats_width
    padding = _padding_before_stats(content_width, used_width, stats_width)
    rail = RAIL_MARKER if selected else " "

    prefix = [
        Span(rail, marker_style),
        Span(" ", base),
        Span(file.status.marker(), status_style),
        Span(" ", base),
    ]
    content = [Span(label, base), Span(padding, base)]
    content.extend(_stat_spans(file, background, theme))

    if content_width <= SIDEBAR_GUTTER_WIDTH:
        return wrap_line(Line(prefix + content), content_width)

    continuation = [
        Span(rail, marker_style),
        Span(" " * (SIDEBAR_GUTTER_WIDTH - 1), base),
    ]
    rows = wrap_styled_spans(content, max(content_width - SIDEBAR_GUTTER_WIDTH, 0))
    return [
        Line([*(prefix if number == 0 else continuation), *row])
        for number, row in enumerate(rows)
    ]


def render_diff_lines(file: DiffFile, content_width: int, theme: Theme) -> list[Line]:
    """All wrapped rows of one file's diff, headers included."""
    lines = wrap_line(_render_file_header(file, content_width, theme), content_width)

    if file.binary:
        lines.extend(wrap_line(_muted_line("Binary file changed", theme), content_width))
        return lines
    if not file.hunks:
        lines.extend(
            wrap_line(
                _muted_line("File changed without textual hunks", theme), content_width
            )
        )
        return lines

    old_highlighter = SyntaxHighlighter.for_path(
        file.old_path or file.display_path(), theme.syntax
    )
    new_highlighter = SyntaxHighlighter.for_path(
        file.path or file.display_path(), theme.syntax
    )
    for hunk in file.hunks:
        lines.extend(
            _hunk_lines(hunk, old_highlighter, new_highlighter, content_width, theme)
        )
    return lines


def render_selected_diff_lines(
    app: App, content_width: int, visible_height: int, theme: Theme
) -> list[Line]:
    """Visible rows of the selected file's diff, rendering it when needed."""
    file = app.selected_file()
    if file is None:
        return [_muted_line(NO_DIFF_MESSAGE, theme)]

    cache = app.diff_lines_cache
    if (
        cache is None
        or cache.file_id != file.id
        or cache.content_width != content_width
        or cache.syntax_palette != theme.syntax
    ):
        app.diff_lines_cache = RenderedDiffLines(
            file_id=file.id,
            content_width=content_width,
            syntax_palette=theme.syntax,
            lines=render_diff_lines(file, content_width, theme),
        )

    app.ensure_scroll_bounds()
    cache = app.diff_lines_cache
    if cache is None:
        return []
    return cache.lines[app.diff_scroll : app.diff_scroll + visible_height]


def changeset_title(app: App) -> str:
    """Title of the diff pane with the total line counts."""
    files = app.changeset.files
    additions = sum(file.additions for file in files)
    deletions = sum(file.deletions for file in files)
    title = app.changeset.title or "changeset"
    return f"{title}  +{additions}  -{deletions}"


def format_file_stats(file: DiffFile) -> str:
    """Added and removed line counts, leaving out zero counts."""
    parts = []
    if file.additions:
        parts.append(f"+{file.additions}")
    if file.deletions:
        parts.append(f"-{file.deletions}")
    return " ".join(parts)


def file_header_label(file: DiffFile) -> str:
    """Full path of a file, or both paths for a rename or copy."""
    if _has_path_change_label(file):
        return f"{file.old_path} -> {file.path}"
    return file.display_path()


def sidebar_file_label(file: DiffFile) -> str:
    """File name of a file, or both names for a rename or copy."""
    if _has_path_change_label(file):
        return f"{_basename(file.old_path)} -> {_basename(file.path)}"
    return _basename(file.display_path())


def format_line_number(line: int | None) -> str:
    """A line number left-aligned in three cells, or blanks."""
    return "   " if line is None else f"{line:<3}"


@dataclass(frozen=True)
class _DiffLineStyle:
    marker: str
    content: Style
    rail: Style


def _split_body(area: Rect) -> tuple[Rect, Rect, Rect]:
    direction, size = body_layout(area)
    total = area.width if direction == HORIZONTAL else area.height
    first = min(size, total)
    divider = min(1, total - first)
    rest = total - first - divider
    if direction == HORIZONTAL:
        return (
            Rect(area.x, area.y, first, area.height),
            Rect(area.x + first, area.y, divider, area.height),
            Rect(area.x + first + divider, area.y, rest, area.height),
        )
    return (
        Rect(area.x, area.y, area.width, first),
        Rect(area.x, area.y + first, area.width, divider),
        Rect(area.x, area.y + first + divider, area.width, rest),
    )


def _render_sidebar(canvas: _Canvas, area: Rect, app: App, theme: Theme) -> None:
    app.sidebar_area = area
    inner_height = max(area.height - 2, 1)
    content_width = max(area.width - PANE_BORDER_WIDTH, 0)
    app.sidebar_view_height = inner_height
    app.ensure_scroll_bounds()

    lines = sidebar_lines(app, content_width, inner_height, theme)
    inner = _render_pane_block(canvas, area, " Files ", app.focus, FocusPane.SIDEBAR, theme)
    canvas.put_lines(inner, lines)


def _render_diff(canvas: _Canvas, area: Rect, app: App, theme: Theme) -> None:
    app.diff_area = area
    inner_height = max(area.height - 2, 1)
    content_width = max(area.width - PANE_BORDER_WIDTH, 0)
    app.diff_view_height = inner_height
    app.ensure_scroll_bounds()

    title = f" {changeset_title(app)} "
    lines = render_selected_diff_lines(app, content_width, inner_height, theme)
    inner = _render_pane_block(canvas, area, title, app.focus, FocusPane.DIFF, theme)
    canvas.put_lines(inner, lines)


def _render_pane_block(
    canvas: _Canvas,
    area: Rect,
    title: str,
    current: FocusPane,
    target: FocusPane,
    theme: Theme,
) -> Rect:
    border = theme.border_active if current is target else theme.border
    return canvas.block(
        area, title, Style(fg=border), _color_style(theme.text, theme.background)
    )


def _ensure_wrapped_sidebar_selection_visible(
    app: App, content_width: int, visible_height: int, theme: Theme
) -> None:
    files = app.changeset.files
    if not files:
        app.sidebar_scroll = 0
        return

    selected_index = min(app.selected_file_index, len(files) - 1)
    app.sidebar_scroll = min(app.sidebar_scroll, len(files) - 1)
    if selected_index < app.sidebar_scroll:
        app.sidebar_scroll = selected_index
        return

    row_counts = [
        len(render_file_entry(index, file, _NO_SELECTION, content_width, theme))
        for index, file in enumerate(files)
    ]
    if not _sidebar_selection_visible(
        row_counts, app.sidebar_scroll, selected_index, visible_height
    ):
        app.sidebar_scroll = _sidebar_scroll_for_selected(
            row_counts, selected_index, visible_height
        )


def _sidebar_selection_visible(
    row_counts: list[int], scroll: int, selected_index: int, visible_height: int
) -> bool:
    if selected_index < scroll:
        return False
    visible_height = max(visible_height, 1)
    rows_before = sum(row_counts[scroll:selected_index])
    if rows_before >= visible_height:
        return False
    return rows_before == 0 or rows_before + row_counts[selected_index] <= visible_height


def _sidebar_scroll_for_selected(
    row_counts: list[int], selected_index: int, visible_height: int
) -> int:
    visible_height = max(visible_height, 1)
    scroll = selected_index
    rows = row_counts[selected_index]
    while scroll > 0:
        previous = row_counts[scroll - 1]
        if rows + previous > visible_height:
            break
        scroll -= 1
        rows += previous
    return scroll


def _hunk_lines(
    hunk: DiffHunk,
    old_highlighter: SyntaxHighlighter,
    new_highlighter: SyntaxHighlighter,
    content_width: int,
    theme: Theme,
) -> list[Line]:
    header_style = _color_style(theme.muted, theme.background_alt).add_modifier(
        Modifier.BOLD
    )
    lines = wrap_line(Line([Span(f" {hunk.header}")], header_style), content_width)
    for line in hunk.lines:
        lines.extend(
            _diff_line(line, old_highlighter, new_highlighter, content_width, theme)
        )
    return lines


def _diff_line(
    line: DiffLine,
    old_highlighter: SyntaxHighlighter,
    new_highlighter: SyntaxHighlighter,
    content_width: int,
    theme: Theme,
) -> list[Line]:
    style = _diff_line_style(line.kind, theme)
    number_style = _color_style(theme.line_number_fg, theme.line_number_bg)
    content_spans = _highlight_diff_content(
        line.kind, line.content, style.content, old_highlighter, new_highlighter
    )
    rows = wrap_styled_spans(content_spans, max(content_width - DIFF_GUTTER_WIDTH, 1))
    first_gutter = [
        Span(RAIL_MARKER, style.rail),
        Span(format_line_number(line.old_line), number_style),
        Span(" ", number_style),
        Span(format_line_number(line.new_line), number_style),
        Span(" ", number_style),
        Span(style.marker, style.content),
        Span(" ", style.content),
    ]
    continuation_gutter = [
        Span(RAIL_MARKER, style.rail),
        Span("   ", number_style),
        Span(" ", number_style),
        Span("   ", number_style),
        Span(" ", number_style),
        Span(" ", style.content),
        Span(" ", style.content),
    ]
    return [
        Line([*(first_gutter if number == 0 else continuation_gutter), *row])
        for number, row in enumerate(rows)
    ]


def _highlight_diff_content(
    kind: DiffLineKind,
    content: str,
    content_style: Style,
    old_highlighter: SyntaxHighlighter,
    new_highlighter: SyntaxHighlighter,
) -> list[Span]:
    expanded = expand_tabs(content)
    if kind is DiffLineKind.ADDED:
        return new_highlighter.highlight_line(expanded, content_style)
    if kind is DiffLineKind.REMOVED:
        return old_highlighter.highlight_line(expanded, content_style)
    if kind is DiffLineKind.CONTEXT:
        if new_highlighter.is_enabled():
            spans = new_highlighter.highlight_line(expanded, content_style)
            old_highlighter.advance_line(expanded)
        else:
            spans = old_highlighter.highlight_line(expanded, content_style)
            new_highlighter.advance_line(expanded)
        return spans
    return [Span(expanded, content_style)]


def _diff_line_style(kind: DiffLineKind, theme: Theme) -> _DiffLineStyle:
    if kind is DiffLineKind.ADDED:
        marker, text, background, rail = "+", theme.added, theme.added_bg, theme.added
    elif kind is DiffLineKind.REMOVED:
        marker, text, background, rail = (
            "-",
            theme.removed,
            theme.removed_bg,
            theme.removed,
        )
    elif kind is DiffLineKind.META:
        marker, text, background, rail = (
            " ",
            theme.muted,
            theme.context_bg,
            theme.line_number_fg,
        )
    else:
        marker, text, background, rail = (
            " ",
            theme.text,
            theme.context_bg,
            theme.line_number_fg,
        )
    return _DiffLineStyle(
        marker=marker,
        content=_color_style(text, background),
        rail=_color_style(rail, background),
    )


def _render_file_header(file: DiffFile, content_width: int, theme: Theme) -> Line:
    label = file_header_label(file)
    suffix = _file_status_suffix(file.status)
    stats = format_file_stats(file)
    stats_width = display_width(stats)
    used_width = display_width(label) + display_width(suffix) + stats_width
    padding = _padding_before_stats(content_width, used_width, stats_width)
    style = _color_style(theme.text, theme.background)
    muted_style = _color_style(theme.muted, theme.background)
    spans = [Span(label, style), Span(suffix, muted_style), Span(padding, style)]
    spans.extend(_stat_spans(file, theme.background, theme))
    return Line(spans)


def _stat_spans(file: DiffFile, background: Color, theme: Theme) -> list[Span]:
    spans = []
    if file.additions > 0:
        spans.append(Span(f"+{file.additions}", _color_style(theme.added, background)))
    if file.additions > 0 and file.deletions > 0:
        spans.append(Span(" ", Style(bg=background)))
    if file.deletions > 0:
        spans.append(
            Span(f"-{file.deletions}", _color_style(theme.removed, background))
        )
    return spans


def _has_path_change_label(file: DiffFile) -> bool:
    return (
        file.status in (FileStatus.RENAMED, FileStatus.COPIED)
        and file.old_path != file.path
    )


def _file_status_suffix(status: FileStatus) -> str:
    return {
        FileStatus.ADDED: " (new)",
        FileStatus.DELETED: " (deleted)",
        FileStatus.COPIED: " (copied)",
    }.get(status, "")


def _status_color(status: FileStatus, theme: Theme) -> Color:
    if status is FileStatus.ADDED:
        return theme.file_new
    if status is FileStatus.DELETED:
        return theme.file_deleted
    if status is FileStatus.MODIFIED:
        return theme.file_modified
    return theme.file_renamed


def _basename(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def _padding_before_stats(content_width: int, used_width: int, stats_width: int) -> str:
    if stats_width == 0:
        return ""
    return " " * max(content_width - used_width, 1)


def _muted_line(text: str, theme: Theme) -> Line:
    return Line([Span(text)], _color_style(theme.muted, theme.background))


def _color_style(foreground: Color, background: Color) -> Style:
    return Style(fg=foreground, bg=background)


def _patch(base: Style, over: Style) -> Style:
    return Style(
        fg=base.fg if over.fg is None else over.fg,
        bg=base.bg if over.bg is None else over.bg,
        modifiers=base.modifiers | over.modifiers,
    )


@dataclass
class _Cell:
    symbol: str = " "
    style: Style = Style()


class _Canvas:
    """A grid of styled cells that widgets are painted onto."""

    def __init__(self, width: int, height: int) -> None:
        self.width = max(width, 0)
        self.height = max(height, 0)
        self._rows = [[_Cell() for _ in range(self.width)] for _ in range(self.height)]

    def _cell(self, x: int, y: int) -> _Cell | None:
        if 0 <= x < self.width and 0 <= y < self.height:
            return self._rows[y][x]
        return None

    def fill_style(self, area: Rect, style: Style) -> None:
        for y in range(area.y, area.y + area.height):
            for x in range(area.x, area.x + area.width):
                cell = self._cell(x, y)
                if cell is not None:
                    cell.style = _patch(cell.style, style)

    def set(self, x: int, y: int, symbol: str, style: Style) -> None:
        cell = self._cell(x, y)
        if cell is not None:
            cell.symbol = symbol
            cell.style = _patch(cell.style, style)

    def put(self, x: int, y: int, text: str, style: Style, limit: int) -> int:
        """Write text from column ``x``, stopping before column ``limit``."""
        previous: _Cell | None = None
        for value in text:
            width = char_display_width(value)
            if width == 0:
                if previous is not None:
                    previous.symbol += value
                continue
            if x + width > limit:
                break
            self.set(x, y, value, style)
            previous = self._cell(x, y)
            for extra in range(x + 1, x + width):
                self.set(extra, y, "", style)
            x += width
        return x

    def block(self, area: Rect, title: str, border_style: Style, style: Style) -> Rect:
        """Paint a bordered, titled block and return its inner area."""
        self.fill_style(area, style)
        if area.width == 0 or area.height == 0:
            return Rect(area.x, area.y, 0, 0)
        right = area.x + area.width - 1
        bottom = area.y + area.height - 1
        for x in range(area.x, right + 1):
            self.set(x, area.y, "─", border_style)
            self.set(x, bottom, "─", border_style)
        for y in range(area.y, bottom + 1):
            self.set(area.x, y, "│", border_style)
            self.set(right, y, "│", border_style)
        self.set(area.x, area.y, "┌", border_style)
        self.set(right, area.y, "┐", border_style)
        self.set(area.x, bottom, "└", border_style)
        self.set(right, bottom, "┘", border_style)
        self.put(area.x + 1, area.y, title, Style(), right)
        return Rect(
            area.x + 1, area.y + 1, max(area.width - 2, 0), max(area.height - 2, 0)
        )

    def put_lines(self, area: Rect, lines: list[Line]) -> None:
        """Paint lines into an area, clipping what does not fit."""
        limit = area.x + area.width
        for y, line in zip(range(area.y, area.y + area.height), lines):
            x = area.x
            for span in line.spans:
                x = self.put(x, y, span.content, _patch(line.style, span.style), limit)

    def lines(self) -> list[Line]:
        return [
            Line(
                [
                    Span("".join(cell.symbol for cell in group), style)
                    for style, group in groupby(
                        (cell for cell in row if cell.symbol), key=attrgetter("style")
                    )
                ]
            )
            for row in self._rows
        ]