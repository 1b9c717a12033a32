"""
Plain-text rendering of hunks and change lists.

The output follows the unified diff layout (file headers, "@@" range
headers, and " ", "+", "-" prefixed lines) with an extra "..." line
wherever unchanged lines were elided between two hunks.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .domain import ChangeRecord, ChangeStatus, Hunk, SnapshotDiff

GAP_MARKER = "..."
NO_NEWLINE_MARKER = "\\ No newline at end of file"

_PREFIXES = {"unchanged": " ", "added": "+", "removed": "-"}
_STATUS_LETTERS = {"added": "A", "modified": "M", "deleted": "D"}


def display_path(path: str) -> str:
    """
    Return path in a form that can always be printed.

    Bytes of a file name that were not valid UTF-8 are shown as \\xNN
    escapes.
    """

    return path.encode("utf-8", errors="surrogateescape").decode("utf-8", errors="backslashreplace")


def format_range(start: int, count: int) -> str:
    """
    Format a 0-based start offset and a line count as a unified diff range.
    """

    # An empty range points at the line before it, as in `diff -u`.
    first = start + 1 if count else start
    return f"{first},{count}"


def render_hunk_header(hunk: Hunk) -> str:
    return (
        f"@@ -{format_range(hunk.old_start, hunk.old_count)}"
        f" +{format_range(hunk.new_start, hunk.new_count)} @@"
    )


def render_hunks(path: str, hunks: Iterable[Hunk], status: Optional[ChangeStatus] = None) -> str:
    """
    Render the hunks of one file. Returns "" when there are no hunks.
    """

    hunks = list(hunks)
    if not hunks:
        return ""

    shown = display_path(path)
    old_label = "/dev/null" if status == "added" else f"a/{shown}"
    new_label = "/dev/null" if status == "deleted" else f"b/{shown}"
    output: List[str] = [f"--- {old_label}", f"+++ {new_label}"]

    for hunk in hunks:
        if hunk.gap_before:
            output.append(GAP_MARKER)
        output.append(render_hunk_header(hunk))
        for run in hunk.runs:
            prefix = _PREFIXES[run.kind]
            for line in run.lines:
                if line.endswith("\n"):
                    output.append(prefix + line[:-1])
                else:
                    output.append(prefix + line)
                    output.append(NO_NEWLINE_MARKER)

    return "\n".join(output) + "\n"


def render_name_status(changes: Iterable[ChangeRecord]) -> str:
    return "".join(f"{_STATUS_LETTERS[change.status]}\t{display_path(change.path)}\n" for change in changes)


def render_snapshot_diff(result: SnapshotDiff) -> str:
    """
    Render every file of a multi-file diff, with placeholders for files
    that are binary or could not be read.
    """

    output: List[str] = []
    for outcome in result.files:
        output.append(f"diff {outcome.status} {display_path(outcome.path)}\n")
        if not outcome.ok:
            output.append(f"(diff unavailable: {outcome.error})\n")
        elif outcome.is_binary:
            output.append("Binary files differ\n")
        elif not outcome.hunks:
            output.append("(no changes)\n")
        else:
            output.append(render_hunks(outcome.path, outcome.hunks, outcome.status))

    for warning in result.warnings:
        output.append(f"warning: skipped {display_path(warning.path)}: {warning.message}\n")

    return "".join(output)
