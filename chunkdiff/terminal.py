"""Full-screen interactive review session on a curses terminal."""

from __future__ import annotations

import curses
import os
import sys
from typing import Any

from chunkdiff.app import EVENT_POLL_INTERVAL, App, KeyCode, KeyEvent, MouseEvent, MouseKind
from chunkdiff.model import Changeset
from chunkdiff.render import THEME_ENV_VAR, active_theme, draw
from chunkdiff.styled import Color, Indexed, Modifier, NamedColor, Rgb, Style, display_width
from chunkdiff.syntax import indexed_rgb, rgb
from chunkdiff.theme import Theme

_POLL_MILLISECONDS = int(EVENT_POLL_INTERVAL * 1000)
_ENABLE_MOTION_TRACKING = "\x1b[?1003h"
_DISABLE_MOTION_TRACKING = "\x1b[?1003l"
_ESC = "\x1b"
_TAB = "\t"
_ENTER_CHARS = ("\n", "\r")
_CTRL_FIRST, _CTRL_LAST = 0x01, 0x1A

_SPECIAL_KEYS: dict[int, KeyCode] = {
    curses.KEY_UP: KeyCode.UP,
    curses.KEY_DOWN: KeyCode.DOWN,
    curses.KEY_LEFT: KeyCode.LEFT,
    curses.KEY_RIGHT: KeyCode.RIGHT,
    curses.KEY_NPAGE: KeyCode.PAGE_DOWN,
    curses.KEY_PPAGE: KeyCode.PAGE_UP,
    curses.KEY_HOME: KeyCode.HOME,
    curses.KEY_END: KeyCode.END,
    curses.KEY_ENTER: KeyCode.ENTER,
}

_ANSI_ORDER: tuple[NamedColor, ...] = (
    NamedColor.BLACK,
    NamedColor.RED,
    NamedColor.GREEN,
    NamedColor.YELLOW,
    NamedColor.BLUE,
    NamedColor.MAGENTA,
    NamedColor.CYAN,
    NamedColor.GRAY,
    NamedColor.DARK_GRAY,
    NamedColor.LIGHT_RED,
    NamedColor.LIGHT_GREEN,
    NamedColor.LIGHT_YELLOW,
    NamedColor.LIGHT_BLUE,
    NamedColor.LIGHT_MAGENTA,
    NamedColor.LIGHT_CYAN,
    NamedColor.WHITE,
)
_DEFAULT_FG_INDEX = 7
_DEFAULT_BG_INDEX = 0


def key_from_curses(code: int | str) -> KeyEvent:
    """Translate a key read from curses into a key event."""
    if isinstance(code, int):
        if code in _SPECIAL_KEYS:
            return KeyEvent(_SPECIAL_KEYS[code])
        if not 0 <= code < 256:
            return KeyEvent(KeyCode.OTHER)
        code = chr(code)

    if code == _ESC:
        return KeyEvent(KeyCode.ESC)
    if code == _TAB:
        return KeyEvent(KeyCode.TAB)
    if code in _ENTER_CHARS:
        return KeyEvent(KeyCode.ENTER)
    if len(code) != 1:
        return KeyEvent(KeyCode.OTHER)
    value = ord(code)
    if _CTRL_FIRST <= value <= _CTRL_LAST:
        return KeyEvent(KeyCode.CHAR, chr(value + 0x60), ctrl=True)
    if code.isprintable():
        return KeyEvent(KeyCode.CHAR, code)
    return KeyEvent(KeyCode.OTHER)


def run(changeset: Changeset) -> None:
    """Show the review screen for a changeset until the user quits."""
    os.environ.setdefault("ESCDELAY", "25")
    theme = active_theme(os.environ.get(THEME_ENV_VAR))
    curses.wrapper(_session, App(changeset), theme)


def _session(screen: Any, app: App, theme: Theme) -> None:
    _configure(screen)
    painter = _Painter()
    tracking = _enable_mouse()
    try:
        while True:
            _paint(screen, app, theme, painter)
            code = _read_key(screen)
            if code is None:
                continue
            if code == curses.KEY_MOUSE:
                event = _read_mouse()
                if event is not None:
                    app.handle_mouse(event)
                continue
            if not app.handle_key(key_from_curses(code)):
                break
    finally:
        if tracking:
            _write_terminal(_DISABLE_MOTION_TRACKING)


def _configure(screen: Any) -> None:
    screen.keypad(True)
    screen.timeout(_POLL_MILLISECONDS)
    for setup in (lambda: curses.curs_set(0), curses.raw):
        try:
            setup()
        except curses.error:
            pass


def _enable_mouse() -> bool:
    try:
        curses.mousemask(curses.ALL_MOUSE_EVENTS | curses.REPORT_MOUSE_POSITION)
        curses.mouseinterval(0)
    except curses.error:
        return False
    _write_terminal(_ENABLE_MOTION_TRACKING)
    return True


def _write_terminal(sequence: str) -> None:
    sys.stdout.write(sequence)
    sys.stdout.flush()


def _read_key(screen: Any) -> int | str | None:
    try:
        return screen.get_wch()
    except curses.error:
        return None


def _read_mouse() -> MouseEvent | None:
    try:
        _, column, row, _, state = curses.getmouse()
    except curses.error:
        return None
    return _mouse_event(state, column, row)


def _mouse_event(state: int, column: int, row: int) -> MouseEvent | None:
    scroll_down = getattr(curses, "BUTTON5_PRESSED", 0)
    if state & curses.BUTTON4_PRESSED:
        kind = MouseKind.SCROLL_UP
    elif scroll_down and state & scroll_down:
        kind = MouseKind.SCROLL_DOWN
    elif state & curses.BUTTON1_PRESSED:
        kind = MouseKind.LEFT_DOWN
    elif state & curses.REPORT_MOUSE_POSITION:
        kind = MouseKind.MOVED
    else:
        return None
    return MouseEvent(kind, column, row)


def _paint(screen: Any, app: App, theme: Theme, painter: _Painter) -> None:
    height, width = screen.getmaxyx()
    lines = draw(app, width, height, theme)
    screen.erase()
    for y, line in enumerate(lines):
        x = 0
        for span in line.spans:
            try:
                screen.addstr(y, x, span.content, painter.attr(span.style))
            except curses.error:
                pass
            x += display_width(span.content)
    screen.refresh()


class _Painter:
    """Turns styles into curses attributes, allocating colour pairs on demand."""

    def __init__(self) -> None:
        self._pairs: dict[tuple[int, int], int] = {}
        self._nearest: dict[tuple[int, int, int], int] = {}
        self._colors = 0
        self._default_colors = False
        try:
            if curses.has_colors():
                curses.start_color()
                self._colors = getattr(curses, "COLORS", 8)
                try:
                    curses.use_default_colors()
                    self._default_colors = True
                except curses.error:
                    pass
        except curses.error:
            self._colors = 0

    def attr(self, style: Style) -> int:
        attr = curses.A_BOLD if Modifier.BOLD in style.modifiers else 0
        if self._colors:
            fg = self._index(style.fg, _DEFAULT_FG_INDEX)
            bg = self._index(style.bg, _DEFAULT_BG_INDEX)
            attr |= self._pair(fg, bg)
        return attr

    def _pair(self, fg: int, bg: int) -> int:
        number = self._pairs.get((fg, bg))
        if number is None:
            number = len(self._pairs) + 1
            if number >= getattr(curses, "COLOR_PAIRS", 0):
                return 0
            try:
                curses.init_pair(number, fg, bg)
            except curses.error:
                return 0
            self._pairs[(fg, bg)] = number
        try:
            return curses.color_pair(number)
        except curses.error:
            return 0

    def _index(self, color: Color | None, fallback: int) -> int:
        if color is None or color is NamedColor.RESET:
            return -1 if self._default_colors else fallback
        if isinstance(color, Indexed) and color.index < self._colors:
            return color.index
        if isinstance(color, NamedColor) and color in _ANSI_ORDER:
            index = _ANSI_ORDER.index(color)
            if index < self._colors:
                return index
        if isinstance(color, Rgb):
            return self._closest((color.r, color.g, color.b))
        return self._closest(rgb(color))

    def _closest(self, target: tuple[int, int, int]) -> int:
        cached = self._nearest.get(target)
        if cached is not None:
            return cached
        candidates = range(16, 256) if self._colors >= 256 else range(min(self._colors, 16))
        best = min(
            candidates,
            key=lambda index: sum(
                (a - b) ** 2 for a, b in zip(indexed_rgb(index), target)
            ),
        )
        self._nearest[target] = best
        return best