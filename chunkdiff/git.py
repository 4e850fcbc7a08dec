"""Loading the working-tree changes of a Git repository."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence

from chunkdiff.model import Changeset
from chunkdiff.patch import parse_unified_diff

_SOURCE_LABEL = "git diff HEAD + untracked"
_DEFAULT_TITLE = "Working tree changes"


class GitError(RuntimeError):
    """A Git command could not be run or reported failure."""


def load_worktree_diff() -> Changeset:
    """Changes against HEAD plus every untracked file, as one changeset."""
    result = _run_git(["diff", "--no-color", "--patch", "--find-renames", "HEAD"])
    if result.returncode != 0:
        raise GitError(f"git diff failed: {_decode(result.stderr).strip()}")

    patch = _decode(result.stdout) + _load_untracked_patches()
    changeset = parse_unified_diff(patch)
    changeset.title = worktree_title()
    changeset.source_label = _SOURCE_LABEL
    return changeset


def untracked_paths() -> list[str]:
    """Paths of untracked files that are not ignored."""
    result = _run_git(["ls-files", "--others", "--exclude-standard", "-z"])
    if result.returncode != 0:
        raise GitError(f"git ls-files failed: {_decode(result.stderr).strip()}")
    return [path for path in _decode(result.stdout).split("\0") if path]


def worktree_title() -> str:
    """Title naming the current branch, or the commit when detached."""
    branch = _current_branch_label()
    return _DEFAULT_TITLE if branch is None else f"{_DEFAULT_TITLE} ({branch})"


def _load_untracked_patches() -> str:
    patches = ""
    for path in untracked_paths():
        result = _run_git(
            ["diff", "--no-color", "--patch", "--no-index", "--", "/dev/null", path]
        )
        if result.returncode not in (0, 1):
            raise GitError(
                f"git diff --no-index failed for {path}: "
                f"{_decode(result.stderr).strip()}"
            )
        if patches and not patches.endswith("\n"):
            patches += "\n"
        patches += _decode(result.stdout)
    return patches


def _current_branch_label() -> str | None:
    branch = _git_stdout(["branch", "--show-current"])
    if branch:
        return branch
    sha = _git_stdout(["rev-parse", "--short", "HEAD"])
    return None if sha is None else f"detached {sha}"


def _git_stdout(args: Sequence[str]) -> str | None:
    try:
        result = _run_git(args)
    except GitError:
        return None
    if result.returncode != 0:
        return None
    value = _decode(result.stdout).strip()
    return value or None


def _run_git(args: Sequence[str]) -> subprocess.CompletedProcess[bytes]:
    try:
        return subprocess.run(["git", *args], capture_output=True, check=False)
    except OSError as exc:
        raise GitError(f"failed to run git: {exc}") from exc


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")