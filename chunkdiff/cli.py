"""Command-line entry point."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from chunkdiff.git import GitError, load_worktree_diff
from chunkdiff.terminal import run

_DIFF = "diff"


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the ``chunk`` command."""
    parser = argparse.ArgumentParser(
        prog="chunk", description="Minimal terminal diff review"
    )
    commands = parser.add_subparsers(dest="command")
    commands.add_parser(_DIFF, help="Review the current Git working tree diff.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command and return its exit status."""
    args = build_parser().parse_args(argv)
    command = args.command or _DIFF
    if command == _DIFF:
        try:
            changeset = load_worktree_diff()
        except GitError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        run(changeset)
    return 0