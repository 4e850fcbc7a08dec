"""Interactive state of the review screen and its input handling."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from chunkdiff.model import Changeset, DiffFile
from chunkdiff.styled import Line
from chunkdiff.theme import SyntaxPalette

EVENT_POLL_INTERVAL = 0.1
MOUSE_WHEEL_STEP = 3

_U16_MAX = 0xFFFF


class FocusPane(enum.Enum):
    """The pane that receives navigation keys."""

    SIDEBAR = enum.auto()
    DIFF = enum.auto()


@dataclass(frozen=True)
class Rect:
    """A rectangular screen area in terminal cells."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return min(self.x + self.width, _U16_MAX)

    @property
    def bottom(self) -> int:
        return min(self.y + self.height, _U16_MAX)

    def contains(self, column: int, row: int) -> bool:
        """Whether the cell lies anywhere in the area, border included."""
        return self.x <= column < self.right and self.y <= row < self.bottom

    def inner_contains(self, column: int, row: int) -> bool:
        """Whether the cell lies inside the one-cell border of the area."""
        return (
            self.x < column < max(self.right - 1, 0)
            and self.y < row < max(self.bottom - 1, 0)
        )


@dataclass
class RenderedDiffLines:
    """Wrapped diff rows of one file, kept until width or palette change."""

    file_id: str
    content_width: int
    syntax_palette: SyntaxPalette
    lines: list[Line]


class KeyCode(enum.Enum):
    """Keys the review screen distinguishes."""

    CHAR = enum.auto()
    ESC = enum.auto()
    TAB = enum.auto()
    LEFT = enum.auto()
    RIGHT = enum.auto()
    ENTER = enum.auto()
    UP = enum.auto()
    DOWN = enum.auto()
    PAGE_UP = enum.auto()
    PAGE_DOWN = enum.auto()
    HOME = enum.auto()
    END = enum.auto()
    OTHER = enum.auto()


@dataclass(frozen=True)
class KeyEvent:
    """A key press; ``char`` is set for character keys."""

    code: KeyCode
    char: str = ""
    ctrl: bool = False


class MouseKind(enum.Enum):
    """Mouse actions the review screen reacts to."""

    LEFT_DOWN = enum.auto()
    SCROLL_DOWN = enum.auto()
    SCROLL_UP = enum.auto()
    MOVED = enum.auto()
    OTHER = enum.auto()


@dataclass(frozen=True)
class MouseEvent:
    """A mouse action at a screen cell."""

    kind: MouseKind
    column: int
    row: int


@dataclass
class App:
    """Selection, focus and scroll positions of the review screen."""

    changeset: Changeset
    selected_file_index: int = 0
    focus: FocusPane = FocusPane.SIDEBAR
    diff_scroll: int = 0
    sidebar_scroll: int = 0
    diff_view_height: int = 1
    sidebar_view_height: int = 1
    sidebar_area: Rect | None = None
    diff_area: Rect | None = None
    sidebar_row_indices: list[int] = field(default_factory=list)
    diff_lines_cache: RenderedDiffLines | None = None

    def selected_file(self) -> DiffFile | None:
        """The file currently selected, if there is one."""
        files = self.changeset.files
        if 0 <= self.selected_file_index < len(files):
            return files[self.selected_file_index]
        return None

    def ensure_scroll_bounds(self) -> None:
        """Clamp scroll positions and keep the selected file in view."""
        self.diff_scroll = min(self.diff_scroll, self.max_diff_scroll())
        self.sidebar_scroll = min(self.sidebar_scroll, self._max_sidebar_scroll())
        self._keep_selected_file_visible()

    def max_diff_scroll(self) -> int:
        """Largest diff scroll that still fills the view."""
        return max(self._selected_file_line_count() - max(self.diff_view_height, 1), 0)

    def handle_key(self, key: KeyEvent) -> bool:
        """Apply a key press; return False when the screen should close."""
        code = key.code
        char = key.char if code is KeyCode.CHAR else ""

        if code is KeyCode.ESC or char == "q":
            return False
        if code is KeyCode.TAB:
            self._toggle_focus()
        elif code is KeyCode.LEFT:
            self.focus = FocusPane.SIDEBAR
        elif code in (KeyCode.RIGHT, KeyCode.ENTER):
            self.focus = FocusPane.DIFF
        elif code is KeyCode.DOWN or char == "j":
            self._move_down()
        elif code is KeyCode.UP or char == "k":
            self._move_up()
        elif code is KeyCode.PAGE_DOWN:
            self._scroll_diff_by(self.diff_view_height)
        elif code is KeyCode.PAGE_UP:
            self._scroll_diff_up_by(self.diff_view_height)
        elif code is KeyCode.HOME or char == "g":
            self.diff_scroll = 0
        elif code is KeyCode.END or char == "G":
            self.diff_scroll = self.max_diff_scroll()
        elif char == "d" and key.ctrl:
            self._scroll_diff_by(self.diff_view_height)
        elif char == "u" and key.ctrl:
            self._scroll_diff_up_by(self.diff_view_height)

        self.ensure_scroll_bounds()
        return True

    def handle_mouse(self, mouse: MouseEvent) -> None:
        """Apply a mouse click, wheel turn or movement."""
        column, row = mouse.column, mouse.row
        if mouse.kind is MouseKind.LEFT_DOWN:
            self._handle_left_click(column, row)
        elif mouse.kind is MouseKind.SCROLL_DOWN:
            self._handle_wheel(column, row, down=True)
        elif mouse.kind is MouseKind.SCROLL_UP:
            self._handle_wheel(column, row, down=False)
        elif mouse.kind is MouseKind.MOVED:
            self._handle_hover(column, row)
        self.ensure_scroll_bounds()

    def select_file(self, index: int) -> None:
        """Select a file, clamped to the list, and scroll its diff to the top."""
        files = self.changeset.files
        if not files:
            return
        self.selected_file_index = min(max(index, 0), len(files) - 1)
        self.diff_scroll = 0

    def _selected_file_line_count(self) -> int:
        file = self.selected_file()
        if file is None:
            return 0
        cache = self.diff_lines_cache
        if cache is not None and cache.file_id == file.id:
            return len(cache.lines)
        return file.line_count()

    def _max_sidebar_scroll(self) -> int:
        return max(len(self.changeset.files) - 1, 0)

    def _keep_selected_file_visible(self) -> None:
        if self.selected_file_index < self.sidebar_scroll:
            self.sidebar_scroll = self.selected_file_index
            return
        span = max(self.sidebar_view_height - 1, 0)
        if self.selected_file_index > self.sidebar_scroll + span:
            self.sidebar_scroll = max(self.selected_file_index - span, 0)

    def _handle_left_click(self, column: int, row: int) -> None:
        index = self._sidebar_index_at(column, row)
        if index is not None:
            self.focus = FocusPane.SIDEBAR
            self.select_file(index)
            return
        if self._is_diff_at(column, row):
            self.focus = FocusPane.DIFF

    def _handle_hover(self, column: int, row: int) -> None:
        if self._is_sidebar_at(column, row):
            self.focus = FocusPane.SIDEBAR
        elif self._is_diff_at(column, row):
            self.focus = FocusPane.DIFF

    def _handle_wheel(self, column: int, row: int, *, down: bool) -> None:
        self.focus = (
            FocusPane.SIDEBAR if self._is_sidebar_at(column, row) else FocusPane.DIFF
        )
        if self.focus is FocusPane.SIDEBAR:
            if down:
                self._select_next_file_by(MOUSE_WHEEL_STEP)
            else:
                self._select_previous_file_by(MOUSE_WHEEL_STEP)
        elif down:
            self._scroll_diff_by(MOUSE_WHEEL_STEP)
        else:
            self._scroll_diff_up_by(MOUSE_WHEEL_STEP)

    def _sidebar_index_at(self, column: int, row: int) -> int | None:
        area = self.sidebar_area
        if area is None or not area.inner_contains(column, row):
            return None
        offset = max(row - (area.y + 1), 0)
        if offset >= len(self.sidebar_row_indices):
            return None
        index = self.sidebar_row_indices[offset]
        return index if index < len(self.changeset.files) else None

    def _is_sidebar_at(self, column: int, row: int) -> bool:
        return self.sidebar_area is not None and self.sidebar_area.contains(column, row)

    def _is_diff_at(self, column: int, row: int) -> bool:
        return self.diff_area is not None and self.diff_area.contains(column, row)

    def _toggle_focus(self) -> None:
        self.focus = (
            FocusPane.DIFF if self.focus is FocusPane.SIDEBAR else FocusPane.SIDEBAR
        )

    def _move_down(self) -> None:
        if self.focus is FocusPane.SIDEBAR:
            self._select_next_file_by(1)
        else:
            self._scroll_diff_by(1)

    def _move_up(self) -> None:
        if self.focus is FocusPane.SIDEBAR:
            self._select_previous_file_by(1)
        else:
            self._scroll_diff_up_by(1)

    def _select_next_file_by(self, amount: int) -> None:
        max_index = max(len(self.changeset.files) - 1, 0)
        self.select_file(min(self.selected_file_index + amount, max_index))

    def _select_previous_file_by(self, amount: int) -> None:
        self.select_file(max(self.selected_file_index - amount, 0))

    def _scroll_diff_by(self, amount: int) -> None:
        self.diff_scroll += amount

    def _scroll_diff_up_by(self, amount: int) -> None:
        self.diff_scroll = max(self.diff_scroll - amount, 0)