# chunkdiff

A small terminal viewer for reviewing the changes in a Git working tree.

It collects everything `git diff HEAD` reports, adds untracked (and not
ignored) files as new files, and shows them in two panes: a file list and the
syntax-highlighted diff of the selected file. Long lines wrap inside the pane,
and each diff line shows its old and new line numbers.

## Installation

```
pip install .
```

The interactive screen uses the standard `curses` module, so it needs a
platform where that module is available.

## Usage

Run it from inside a Git repository:

```
chunk
```

or, equivalently:

```
chunk diff
```

If Git cannot be run or reports a failure, the command prints
`error: ...` to standard error and exits with status 1.

If the terminal is at least 100 columns wide the file list sits to the left
of the diff; on narrower terminals it sits above it.

### Theme

Set `CHUNK_THEME=github-dark` to use the `github-dark` colour theme. Any
other value, or none, selects the default theme.

### Keys

| Key                    | Action                                          |
|------------------------|-------------------------------------------------|
| `q`, `Esc`             | Quit                                            |
| `Tab`                  | Switch focus between file list and diff         |
| `Left`                 | Focus the file list                             |
| `Right`, `Enter`       | Focus the diff                                  |
| `Down`, `j`            | Next file, or scroll the diff down one line     |
| `Up`, `k`              | Previous file, or scroll the diff up one line   |
| `PageDown`, `Ctrl-d`   | Scroll the diff down one page                   |
| `PageUp`, `Ctrl-u`     | Scroll the diff up one page                     |
| `Home`, `g`            | Jump to the top of the diff                     |
| `End`, `G`             | Jump to the bottom of the diff                  |

The mouse works too: click a file to select it, turn the wheel over either
pane (three files or three lines per step), and moving the pointer over a
pane focuses it.

## Using it as a library

The diff parser can be used on its own:

```python
from chunkdiff.patch import parse_unified_diff

changeset = parse_unified_diff(patch_text)
for file in changeset.files:
    print(file.status.marker(), file.display_path(), file.additions, file.deletions)
```

`chunkdiff.git.load_worktree_diff()` returns the same kind of `Changeset`
for the current repository, and `chunkdiff.render.draw(app, width, height)`
renders an `chunkdiff.app.App` into a list of styled `Line` rows without
needing a terminal.

## What it does not do

The viewer is read-only and always compares the working tree with `HEAD`.
It has no options for other revisions or for staged changes only, and it
cannot stage, revert or edit changes.

## Running the tests

```
pip install .[test]
pytest
```