"""
Hunk segmentation for hunkview.

segment() repackages a line-level edit script into display hunks. Each
hunk carries at most `context_size` unchanged lines before its first
change and after its last one. Two changed regions separated by no more
than `merge_threshold(context_size)` unchanged lines share a hunk;
anything longer is elided and starts a new hunk marked with gap_before.

The segmenter is an explicit two-state machine:

  idle     -- no hunk is open. An unchanged run only feeds the pending
              leading context (its trailing `context_size` lines); a
              changed run opens a hunk.
  in_hunk  -- a hunk is open. Changed runs and short unchanged runs are
              appended; a long unchanged run closes the hunk and leaves
              its tail behind as the next hunk's leading context.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .domain import Hunk, LineRun
from .errors import InvalidArgumentError

LOG = logging.getLogger(__name__)

DEFAULT_CONTEXT_SIZE = 3


def merge_threshold(context_size: int) -> int:
    """
    Longest unchanged stretch that still joins two changes into one hunk.
    """

    return 2 * context_size


def validate_context_size(context_size: int) -> None:
    if context_size < 0:
        raise InvalidArgumentError(f"context size must be >= 0, got {context_size}")


def segment(edit_script: Iterable[LineRun], context_size: int = DEFAULT_CONTEXT_SIZE) -> List[Hunk]:
    """
    Split an edit script into context-bounded hunks.

    Returns an empty list when the script contains no added or removed
    lines. The result is a pure function of the inputs.
    """

    validate_context_size(context_size)
    return _Segmenter(context_size).run(coalesce_runs(edit_script))


def coalesce_runs(runs: Iterable[LineRun]) -> List[LineRun]:
    """
    Merge adjacent runs of the same kind and drop empty runs.

    The returned runs are copies; the input is never modified.
    """

    merged: List[LineRun] = []
    for run in runs:
        if not run.lines:
            continue
        if merged and merged[-1].kind == run.kind:
            merged[-1].lines.extend(run.lines)
        else:
            merged.append(LineRun(kind=run.kind, lines=list(run.lines)))
    return merged


class _Segmenter:
    def __init__(self, context_size: int) -> None:
        self.context_size = context_size
        self.threshold = merge_threshold(context_size)

        self.hunks: List[Hunk] = []
        # The open hunk; None in the idle state.
        self.current: Optional[Hunk] = None

        # Leading context waiting for the next changed run.
        self.pending: List[str] = []
        self.gap_pending = False

        self.old_pos = 0
        self.new_pos = 0

    def run(self, runs: List[LineRun]) -> List[Hunk]:
        for run in runs:
            if run.kind == "unchanged":
                self._on_unchanged(run)
            else:
                self._on_change(run)
            self._advance(run)

        if self.current is not None:
            self._close(self.current)
        return self.hunks

    def _advance(self, run: LineRun) -> None:
        if run.kind != "added":
            self.old_pos += len(run.lines)
        if run.kind != "removed":
            self.new_pos += len(run.lines)

    def _on_unchanged(self, run: LineRun) -> None:
        current = self.current
        if current is None:
            self.pending = self._tail(self.pending + run.lines)
            return

        if len(run.lines) <= self.threshold:
            current.runs.append(LineRun(kind="unchanged", lines=list(run.lines)))
            return

        LOG.debug(
            "Eliding %d unchanged lines at old line %d",
            len(run.lines) - 2 * self.context_size,
            self.old_pos + self.context_size,
        )
        head = self._head(run.lines)
        if head:
            current.runs.append(LineRun(kind="unchanged", lines=head))
        self._close(current)
        self.pending = self._tail(run.lines)
        self.gap_pending = True

    def _on_change(self, run: LineRun) -> None:
        current = self.current
        if current is None:
            current = self._open()
        current.runs.append(LineRun(kind=run.kind, lines=list(run.lines)))

    def _open(self) -> Hunk:
        lead = len(self.pending)
        hunk = Hunk(
            runs=[LineRun(kind="unchanged", lines=self.pending)] if self.pending else [],
            gap_before=self.gap_pending,
            old_start=self.old_pos - lead,
            new_start=self.new_pos - lead,
        )
        self.pending = []
        self.gap_pending = False
        self.current = hunk
        return hunk

    def _close(self, hunk: Hunk) -> None:
        runs = hunk.runs
        # A short unchanged run absorbed last never met a following
        # change, so it is trailing context and gets the normal bound.
        if runs and runs[-1].kind == "unchanged" and len(runs[-1].lines) > self.context_size:
            head = self._head(runs[-1].lines)
            if head:
                runs[-1] = LineRun(kind="unchanged", lines=head)
            else:
                runs.pop()

        self.hunks.append(hunk)
        self.current = None

    def _head(self, lines: List[str]) -> List[str]:
        return list(lines[: self.context_size])

    def _tail(self, lines: List[str]) -> List[str]:
        return list(lines[len(lines) - self.context_size :]) if len(lines) > self.context_size else list(lines)
