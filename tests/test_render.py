import pytest

from chunkdiff.app import App, FocusPane, Rect
from chunkdiff.model import (
    Changeset,
    DiffFile,
    DiffHunk,
    DiffLine,
    DiffLineKind,
    FileStatus,
)
from chunkdiff.render import (
    DIFF_GUTTER_WIDTH,
    HORIZONTAL,
    NO_DIFF_MESSAGE,
    NO_TRACKED_CHANGES,
    RAIL_MARKER,
    VERTICAL,
    active_theme,
    body_layout,
    changeset_title,
    draw,
    file_header_label,
    format_file_stats,
    format_line_number,
    render_diff_lines,
    render_file_entry,
    render_selected_diff_lines,
    sidebar_file_label,
    sidebar_lines,
)
from chunkdiff.theme import Theme


def diff_file_with_line(kind, content):
    return DiffFile(
        id="0",
        old_path="sample.unknown",
        path="sample.unknown",
        status=FileStatus.MODIFIED,
        additions=int(kind is DiffLineKind.ADDED),
        deletions=int(kind is DiffLineKind.REMOVED),
        hunks=[
            DiffHunk(
                header="@@ -1 +1 @@",
                old_start=1,
                old_lines=1,
                new_start=1,
                new_lines=1,
                lines=[
                    DiffLine(
                        kind=kind,
                        old_line=None if kind is DiffLineKind.ADDED else 1,
                        new_line=None if kind is DiffLineKind.REMOVED else 1,
                        content=content,
                    )
                ],
            )
        ],
        binary=False,
    )


def diff_file_with_path(path):
    file = diff_file_with_line(DiffLineKind.CONTEXT, "short")
    file.id = path
    file.old_path = path
    file.path = path
    file.additions = 12
    file.deletions = 3
    return file


def app_with_files(files, selected_file_index):
    return App(changeset=Changeset(files=files), selected_file_index=selected_file_index)


def diff_rows(lines):
    return [line for line in lines if line.text().startswith(RAIL_MARKER)]


LONG_TEXT = "alpha beta gamma delta epsilon zeta eta theta iota"


@pytest.mark.parametrize(
    "kind",
    [DiffLineKind.ADDED, DiffLineKind.REMOVED, DiffLineKind.CONTEXT, DiffLineKind.META],
)
def test_wraps_added_removed_context_and_meta_content(kind):
    file = diff_file_with_line(kind, LONG_TEXT)
    content_width = DIFF_GUTTER_WIDTH + 12
    rows = diff_rows(render_diff_lines(file, content_width, Theme.github_dark()))

    assert len(rows) > 1
    assert all(line.width() <= content_width for line in rows)


def test_continuation_rows_align_under_diff_content():
    file = diff_file_with_line(DiffLineKind.ADDED, LONG_TEXT)
    content_width = DIFF_GUTTER_WIDTH + 12
    rows = diff_rows(render_diff_lines(file, content_width, Theme.github_dark()))

    first_prefix = rows[0].text()[:DIFF_GUTTER_WIDTH]
    assert "+" in first_prefix

    continuation_prefix = rows[1].text()[:DIFF_GUTTER_WIDTH]
    assert continuation_prefix == RAIL_MARKER + " " * (DIFF_GUTTER_WIDTH - 1)

    continuation_content = rows[1].text()[DIFF_GUTTER_WIDTH:]
    assert continuation_content
    assert not continuation_content.startswith("+")


def test_sidebar_entries_wrap_to_content_width():
    app = app_with_files(
        [diff_file_with_path("src/components/extremely_long_file_name_component.rs")], 0
    )
    content_width = 16
    lines = sidebar_lines(app, content_width, 8, Theme.github_dark())

    assert len(lines) > 1
    assert all(line.width() <= content_width for line in lines)
    assert app.sidebar_row_indices == [0] * len(lines)


def test_sidebar_scroll_accounts_for_wrapped_rows():
    app = app_with_files(
        [
            diff_file_with_path("first_extremely_long_file_name.rs"),
            diff_file_with_path("second_extremely_long_file_name.rs"),
        ],
        1,
    )
    lines = sidebar_lines(app, 14, 2, Theme.github_dark())

    assert app.sidebar_scroll == 1
    assert len(lines) == 2
    assert app.sidebar_row_indices == [1, 1]


def test_sidebar_without_files_shows_message():
    app = app_with_files([], 0)
    lines = sidebar_lines(app, 30, 5, Theme.github_dark())
    assert [line.text() for line in lines] == [NO_TRACKED_CHANGES]
    assert app.sidebar_row_indices == []


def test_render_file_entry_marks_selection():
    file = diff_file_with_path("src/a.rs")
    theme = Theme.github_dark()
    selected = render_file_entry(0, file, 0, 30, theme)
    unselected = render_file_entry(0, file, 5, 30, theme)
    assert selected[0].text().startswith(RAIL_MARKER + " M a.rs")
    assert unselected[0].text().startswith("  M a.rs")
    assert selected[0].text().endswith("+12 -3")
    assert selected[0].width() == 30


def test_file_header_pads_stats_to_width():
    file = diff_file_with_line(DiffLineKind.ADDED, "x")
    lines = render_diff_lines(file, 40, Theme.github_dark())
    assert lines[0].text() == "sample.unknown" + " " * 24 + "+1"
    assert lines[1].text() == " @@ -1 +1 @@"


def test_added_file_header_has_suffix():
    file = diff_file_with_line(DiffLineKind.ADDED, "x")
    file.status = FileStatus.ADDED
    lines = render_diff_lines(file, 60, Theme.github_dark())
    assert lines[0].text().startswith("sample.unknown (new)")


def test_binary_and_hunkless_files():
    theme = Theme.github_dark()
    binary = DiffFile(id="0", path="img.png", binary=True)
    empty = DiffFile(id="1", path="empty.txt")
    assert [line.text() for line in render_diff_lines(binary, 60, theme)] == [
        "img.png",
        "Binary file changed",
    ]
    assert [line.text() for line in render_diff_lines(empty, 60, theme)] == [
        "empty.txt",
        "File changed without textual hunks",
    ]


def test_diff_row_has_line_numbers_and_marker():
    file = diff_file_with_line(DiffLineKind.REMOVED, "gone")
    rows = diff_rows(render_diff_lines(file, 60, Theme.github_dark()))
    assert rows[0].text() == RAIL_MARKER + "1       - gone"


def test_render_selected_diff_lines_caches_and_limits():
    app = app_with_files([diff_file_with_line(DiffLineKind.ADDED, LONG_TEXT)], 0)
    theme = Theme.github_dark()
    visible = render_selected_diff_lines(app, DIFF_GUTTER_WIDTH + 12, 2, theme)
    assert len(visible) == 2
    cache = app.diff_lines_cache
    assert cache.file_id == "0"
    assert cache.content_width == DIFF_GUTTER_WIDTH + 12
    assert cache.syntax_palette == theme.syntax
    assert len(cache.lines) > 3
    assert visible[0].text() == cache.lines[0].text()


def test_render_selected_diff_lines_without_files():
    app = app_with_files([], 0)
    lines = render_selected_diff_lines(app, 40, 5, Theme.github_dark())
    assert [line.text() for line in lines] == [NO_DIFF_MESSAGE]


def test_changeset_title():
    app = app_with_files([diff_file_with_path("a.rs"), diff_file_with_path("b.rs")], 0)
    assert changeset_title(app) == "changeset  +24  -6"
    app.changeset.title = "Working tree changes (main)"
    assert changeset_title(app) == "Working tree changes (main)  +24  -6"


@pytest.mark.parametrize(
    ("additions", "deletions", "expected"),
    [(0, 0, ""), (3, 0, "+3"), (0, 4, "-4"), (5, 2, "+5 -2")],
)
def test_format_file_stats(additions, deletions, expected):
    file = DiffFile(id="0", path="a", additions=additions, deletions=deletions)
    assert format_file_stats(file) == expected


def test_format_line_number():
    assert format_line_number(None) == "   "
    assert format_line_number(7) == "7  "
    assert format_line_number(1234) == "1234"


def test_labels_for_renames_and_plain_files():
    renamed = DiffFile(
        id="0", old_path="old/a.rs", path="new/b.rs", status=FileStatus.RENAMED
    )
    modified = DiffFile(id="1", old_path="src/x.rs", path="src/x.rs")
    deleted = DiffFile(id="2", old_path="src/gone.rs", path="")
    assert file_header_label(renamed) == "old/a.rs -> new/b.rs"
    assert sidebar_file_label(renamed) == "a.rs -> b.rs"
    assert file_header_label(modified) == "src/x.rs"
    assert sidebar_file_label(modified) == "x.rs"
    assert sidebar_file_label(deleted) == "gone.rs"


def test_active_theme():
    assert active_theme("github-dark") == Theme.github_dark()
    assert active_theme(None) == Theme.matte_box()
    assert active_theme("unknown") == Theme.matte_box()


@pytest.mark.parametrize(
    ("area", "expected"),
    [
        (Rect(0, 0, 120, 40), (HORIZONTAL, 34)),
        (Rect(0, 0, 100, 5), (HORIZONTAL, 34)),
        (Rect(0, 0, 80, 40), (VERTICAL, 9)),
        (Rect(0, 0, 60, 5), (VERTICAL, 5)),
    ],
)
def test_body_layout(area, expected):
    assert body_layout(area) == expected


def test_draw_wide_screen():
    app = app_with_files([diff_file_with_path("src/a.rs")], 0)
    lines = draw(app, 120, 20, Theme.github_dark())

    assert len(lines) == 20
    assert all(line.width() == 120 for line in lines)
    assert app.sidebar_area == Rect(0, 0, 34, 20)
    assert app.diff_area == Rect(35, 0, 85, 20)
    assert app.sidebar_view_height == 18
    assert lines[0].text().startswith("┌ Files ")
    assert "changeset  +12  -3" in lines[0].text()
    assert lines[1].text().startswith("│" + RAIL_MARKER + " M a.rs")
    assert app.sidebar_row_indices == [0]


def test_draw_narrow_screen_stacks_panes():
    app = app_with_files([diff_file_with_path("a.rs")], 0)
    lines = draw(app, 80, 30, Theme.matte_box())

    assert len(lines) == 30
    assert app.sidebar_area == Rect(0, 0, 80, 9)
    assert app.diff_area == Rect(0, 10, 80, 20)
    assert lines[8].text() == "└" + "─" * 78 + "┘"
    assert lines[10].text().startswith("┌ changeset")


def test_draw_focus_colors_border():
    theme = Theme.github_dark()
    app = app_with_files([diff_file_with_path("a.rs")], 0)
    app.focus = FocusPane.DIFF
    lines = draw(app, 120, 10, theme)
    corner = lines[0].spans[0]
    assert corner.content.startswith("┌")
    assert corner.style.fg == theme.border