import pytest

from chunkdiff.app import (
    App,
    FocusPane,
    KeyCode,
    KeyEvent,
    MouseEvent,
    MouseKind,
    Rect,
    RenderedDiffLines,
)
from chunkdiff.model import (
    Changeset,
    DiffFile,
    DiffHunk,
    DiffLine,
    DiffLineKind,
    FileStatus,
)
from chunkdiff.styled import Line, Span
from chunkdiff.theme import Theme


def _file(file_id: str, lines: int = 1) -> DiffFile:
    return DiffFile(
        id=file_id,
        old_path="sample.txt",
        path="sample.txt",
        status=FileStatus.MODIFIED,
        hunks=[
            DiffHunk(
                header="@@ -1 +1 @@",
                old_start=1,
                old_lines=1,
                new_start=1,
                new_lines=1,
                lines=[
                    DiffLine(DiffLineKind.CONTEXT, n + 1, n + 1, "short")
                    for n in range(lines)
                ],
            )
        ],
    )


def _app(count: int = 1, lines: int = 1) -> App:
    return App(Changeset(files=[_file(str(i), lines) for i in range(count)]))


def _char(value: str, ctrl: bool = False) -> KeyEvent:
    return KeyEvent(KeyCode.CHAR, value, ctrl)


def test_diff_scroll_bounds_use_rendered_rows_when_available():
    app = _app()
    app.diff_view_height = 3
    app.diff_scroll = 99
    app.diff_lines_cache = RenderedDiffLines(
        file_id="0",
        content_width=24,
        syntax_palette=Theme.github_dark().syntax,
        lines=[Line([Span("row")]) for _ in range(8)],
    )

    app.ensure_scroll_bounds()

    assert app.diff_scroll == 5


def test_diff_scroll_uses_file_line_count_without_cache():
    app = _app(lines=10)
    app.diff_view_height = 4
    app.diff_scroll = 100
    app.ensure_scroll_bounds()
    assert app.diff_scroll == app.max_diff_scroll() == 12 - 4


@pytest.mark.parametrize("key", [KeyEvent(KeyCode.ESC), KeyEvent(KeyCode.CHAR, "q")])
def test_quit_keys_return_false(key):
    assert _app().handle_key(key) is False


def test_tab_toggles_focus():
    app = _app()
    assert app.handle_key(KeyEvent(KeyCode.TAB)) is True
    assert app.focus is FocusPane.DIFF
    app.handle_key(KeyEvent(KeyCode.TAB))
    assert app.focus is FocusPane.SIDEBAR


def test_left_right_enter_set_focus():
    app = _app()
    app.handle_key(KeyEvent(KeyCode.ENTER))
    assert app.focus is FocusPane.DIFF
    app.handle_key(KeyEvent(KeyCode.LEFT))
    assert app.focus is FocusPane.SIDEBAR
    app.handle_key(KeyEvent(KeyCode.RIGHT))
    assert app.focus is FocusPane.DIFF


def test_j_in_sidebar_selects_next_file_and_resets_scroll():
    app = _app(count=3, lines=20)
    app.diff_scroll = 4
    app.handle_key(_char("j"))
    assert app.selected_file_index == 1
    assert app.diff_scroll == 0
    assert app.selected_file().id == "1"


def test_sidebar_selection_clamps_at_ends():
    app = _app(count=2)
    app.handle_key(KeyEvent(KeyCode.DOWN))
    app.handle_key(KeyEvent(KeyCode.DOWN))
    assert app.selected_file_index == 1
    app.handle_key(_char("k"))
    app.handle_key(KeyEvent(KeyCode.UP))
    assert app.selected_file_index == 0


def test_down_in_diff_scrolls_by_one():
    app = _app(lines=20)
    app.focus = FocusPane.DIFF
    app.diff_view_height = 5
    app.handle_key(KeyEvent(KeyCode.DOWN))
    app.handle_key(_char("j"))
    assert app.diff_scroll == 2
    app.handle_key(_char("k"))
    assert app.diff_scroll == 1


def test_end_and_home_keys():
    app = _app(lines=20)
    app.diff_view_height = 5
    app.handle_key(_char("G"))
    assert app.diff_scroll == app.max_diff_scroll()
    app.handle_key(KeyEvent(KeyCode.HOME))
    assert app.diff_scroll == 0
    app.handle_key(KeyEvent(KeyCode.END))
    assert app.diff_scroll == 22 - 5
    app.handle_key(_char("g"))
    assert app.diff_scroll == 0


def test_page_keys_scroll_by_view_height():
    app = _app(lines=30)
    app.diff_view_height = 5
    app.handle_key(KeyEvent(KeyCode.PAGE_DOWN))
    assert app.diff_scroll == 5
    app.handle_key(KeyEvent(KeyCode.PAGE_UP))
    assert app.diff_scroll == 0


def test_ctrl_d_and_ctrl_u_need_control():
    app = _app(lines=30)
    app.diff_view_height = 4
    app.handle_key(_char("d"))
    assert app.diff_scroll == 0
    app.handle_key(_char("d", ctrl=True))
    assert app.diff_scroll == 4
    app.handle_key(_char("u"))
    assert app.diff_scroll == 4
    app.handle_key(_char("u", ctrl=True))
    assert app.diff_scroll == 0


def test_select_file_clamps_and_ignores_empty():
    app = _app(count=3)
    app.select_file(10)
    assert app.selected_file_index == 2
    empty = App(Changeset())
    empty.select_file(5)
    assert empty.selected_file_index == 0
    assert empty.selected_file() is None


def test_selected_file_stays_visible_in_sidebar():
    app = _app(count=5)
    app.sidebar_view_height = 2
    app.select_file(4)
    app.ensure_scroll_bounds()
    assert app.sidebar_scroll == 3
    app.select_file(1)
    app.ensure_scroll_bounds()
    assert app.sidebar_scroll == 1


def test_rect_contains_and_inner_contains():
    area = Rect(2, 3, 10, 5)
    assert area.contains(2, 3)
    assert area.contains(11, 7)
    assert not area.contains(12, 3)
    assert not area.contains(2, 8)
    assert not area.inner_contains(2, 4)
    assert area.inner_contains(3, 4)
    assert area.inner_contains(10, 6)
    assert not area.inner_contains(11, 6)


def test_click_on_sidebar_row_selects_file():
    app = _app(count=3)
    app.focus = FocusPane.DIFF
    app.sidebar_area = Rect(0, 0, 20, 10)
    app.sidebar_row_indices = [0, 0, 1, 2]
    app.handle_mouse(MouseEvent(MouseKind.LEFT_DOWN, 5, 3))
    assert app.focus is FocusPane.SIDEBAR
    assert app.selected_file_index == 1


def test_click_on_sidebar_border_does_not_select():
    app = _app(count=3)
    app.sidebar_area = Rect(0, 0, 20, 10)
    app.sidebar_row_indices = [0, 1, 2]
    app.handle_mouse(MouseEvent(MouseKind.LEFT_DOWN, 5, 0))
    assert app.selected_file_index == 0


def test_click_on_diff_focuses_diff():
    app = _app()
    app.sidebar_area = Rect(0, 0, 20, 10)
    app.diff_area = Rect(21, 0, 40, 10)
    app.handle_mouse(MouseEvent(MouseKind.LEFT_DOWN, 30, 5))
    assert app.focus is FocusPane.DIFF


def test_wheel_over_diff_scrolls_by_step():
    app = _app(lines=30)
    app.diff_view_height = 5
    app.sidebar_area = Rect(0, 0, 20, 10)
    app.diff_area = Rect(21, 0, 40, 10)
    app.handle_mouse(MouseEvent(MouseKind.SCROLL_DOWN, 30, 5))
    assert app.focus is FocusPane.DIFF
    assert app.diff_scroll == 3
    app.handle_mouse(MouseEvent(MouseKind.SCROLL_UP, 30, 5))
    assert app.diff_scroll == 0


def test_wheel_over_sidebar_moves_selection():
    app = _app(count=5)
    app.focus = FocusPane.DIFF
    app.sidebar_area = Rect(0, 0, 20, 10)
    app.handle_mouse(MouseEvent(MouseKind.SCROLL_DOWN, 3, 3))
    assert app.focus is FocusPane.SIDEBAR
    assert app.selected_file_index == 3
    app.handle_mouse(MouseEvent(MouseKind.SCROLL_DOWN, 3, 3))
    assert app.selected_file_index == 4
    app.handle_mouse(MouseEvent(MouseKind.SCROLL_UP, 3, 3))
    assert app.selected_file_index == 1


def test_hover_sets_focus():
    app = _app()
    app.sidebar_area = Rect(0, 0, 20, 10)
    app.diff_area = Rect(21, 0, 40, 10)
    app.handle_mouse(MouseEvent(MouseKind.MOVED, 25, 2))
    assert app.focus is FocusPane.DIFF
    app.handle_mouse(MouseEvent(MouseKind.MOVED, 1, 2))
    assert app.focus is FocusPane.SIDEBAR