"""
Core domain models for hunkview.

These dataclasses describe tree changes, edit scripts, hunks and
per-file diff results. They intentionally avoid any direct git
dependency so they can be shared by the tree differ, the hunk
segmenter and the snapshot stores.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

ChangeStatus = Literal["added", "modified", "deleted"]
RunKind = Literal["unchanged", "added", "removed"]


@dataclass(frozen=True)
class TreeEntry:
    """
    A single child of a directory in a snapshot.

    content_id is the content-addressed identifier of the entry (for git,
    the object id). Two blobs with equal content_id have equal content.
    """

    name: str
    kind: str
    content_id: Optional[str]


@dataclass(frozen=True)
class ChangeRecord:
    """
    A file that differs between two snapshots.

    Directories are structural and never appear as change records.
    """

    path: str
    status: ChangeStatus


@dataclass(frozen=True)
class TreeWalkWarning:
    """
    A tree entry the walk had to skip.
    """

    path: str
    message: str


@dataclass
class TreeDiffResult:
    """
    Changed paths between two snapshots, in walk order.

    base_id and target_id are the store handles the names resolved to,
    so follow-up blob reads see exactly the compared snapshots.
    """

    base: str
    target: str
    base_id: str = ""
    target_id: str = ""
    changes: List[ChangeRecord] = field(default_factory=list)
    warnings: List[TreeWalkWarning] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.warnings)


@dataclass
class LineRun:
    """
    A contiguous block of lines sharing one classification.

    Lines keep their trailing line terminator, except possibly the last
    line of a file that does not end with one.
    """

    kind: RunKind
    lines: List[str]

    @property
    def is_change(self) -> bool:
        return self.kind != "unchanged"


@dataclass
class Hunk:
    """
    A context-bounded region of a file diff, rendered as one unit.

    old_start and new_start are 0-based offsets of the hunk's first line
    in the original and modified texts. gap_before is set when unchanged
    lines were elided between the previous hunk and this one.
    """

    runs: List[LineRun] = field(default_factory=list)
    gap_before: bool = False
    old_start: int = 0
    new_start: int = 0

    @property
    def old_count(self) -> int:
        return sum(len(run.lines) for run in self.runs if run.kind != "added")

    @property
    def new_count(self) -> int:
        return sum(len(run.lines) for run in self.runs if run.kind != "removed")

    def old_lines(self) -> List[str]:
        return [line for run in self.runs if run.kind != "added" for line in run.lines]

    def new_lines(self) -> List[str]:
        return [line for run in self.runs if run.kind != "removed" for line in run.lines]


@dataclass
class FileDiff:
    """
    Both versions of one file, ready for the hunk segmenter.

    status comes from the tree differ when known. An "added" file has no
    original and a "deleted" file has no modified text, which is not the
    same thing as a file whose content is the empty string.
    """

    path: str
    original: str
    modified: str
    status: Optional[ChangeStatus] = None


@dataclass
class FileDiffOutcome:
    """
    Result of diffing one changed path; either hunks or an error.
    """

    path: str
    status: ChangeStatus
    hunks: List[Hunk] = field(default_factory=list)
    is_binary: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SnapshotDiff:
    """
    Per-file diffs between two snapshots, in tree walk order.
    """

    base: str
    target: str
    files: List[FileDiffOutcome] = field(default_factory=list)
    warnings: List[TreeWalkWarning] = field(default_factory=list)

    @property
    def failed(self) -> List[FileDiffOutcome]:
        return [outcome for outcome in self.files if not outcome.ok]
