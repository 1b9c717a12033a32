"""
Command-line interface for hunkview.

This module is responsible for argument parsing and delegating to the
diff entry points with a git-backed snapshot store.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .config import Config
from .differ import diff_snapshots
from .errors import HunkviewError
from .git_adapter import GitSnapshotStore
from .logging_utils import configure_logging
from .render import display_path, render_name_status, render_snapshot_diff
from .tree_differ import diff_trees


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hunkview",
        description=(
            "Compare two snapshots of a git repository (branches, tags, "
            "commits or trees) and show the changed files as context-bounded hunks."
        ),
    )

    parser.add_argument("base", help="Snapshot to compare from (e.g. main).")
    parser.add_argument("target", help="Snapshot to compare to (e.g. a feature branch).")
    parser.add_argument(
        "-C",
        "--repo",
        default=None,
        help="Path to the git repository (default: current directory).",
    )
    parser.add_argument(
        "-U",
        "--context",
        dest="context_size",
        type=int,
        default=3,
        help="Number of unchanged context lines around each change (default: 3).",
    )
    parser.add_argument(
        "--name-status",
        action="store_true",
        help="Only list changed paths with their status.",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        dest="max_workers",
        type=int,
        default=None,
        help="Number of files to diff in parallel.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be specified multiple times).",
    )

    return parser


def run(config: Config) -> str:
    """
    Execute a configured comparison and return the text to print.
    """

    store = GitSnapshotStore(repo=config.repo)

    if config.name_status:
        result = diff_trees(store, config.base, config.target)
        output = render_name_status(result.changes)
        for warning in result.warnings:
            output += f"warning: skipped {display_path(warning.path)}: {warning.message}\n"
        return output

    snapshot_diff = diff_snapshots(
        store,
        config.base,
        config.target,
        context_size=config.context_size,
        max_workers=config.max_workers,
    )
    return render_snapshot_diff(snapshot_diff)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    config = Config(
        base=args.base,
        target=args.target,
        repo=args.repo,
        context_size=args.context_size,
        name_status=args.name_status,
        max_workers=args.max_workers,
        verbosity=args.verbose,
    )

    configure_logging(verbosity=config.verbosity)

    try:
        sys.stdout.write(run(config))
    except KeyboardInterrupt:
        # Graceful shutdown on Ctrl+C
        return 130
    except HunkviewError as exc:
        print(f"hunkview: error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
