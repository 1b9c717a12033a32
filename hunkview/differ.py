"""
High-level diff entry points for hunkview.

diff_file() turns two whole-file texts into hunks. diff_snapshots() is
responsible for:
  - finding the changed paths between two snapshots,
  - reading both versions of every changed file,
  - segmenting each file into hunks concurrently, and
  - returning per-file outcomes in the tree walk order.

A file that cannot be read gets an error outcome; it never prevents the
other files from being diffed.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from .domain import ChangeRecord, FileDiff, FileDiffOutcome, Hunk, SnapshotDiff
from .edit_script import compute_edit_script
from .errors import BlobReadError, InvalidArgumentError
from .hunks import DEFAULT_CONTEXT_SIZE, segment, validate_context_size
from .lines import split_lines
from .store import SnapshotStore
from .tree_differ import diff_trees

LOG = logging.getLogger(__name__)

# Same window git uses to sniff binary content.
_BINARY_SNIFF_BYTES = 8000


def diff_file(original: str, modified: str, context_size: int = DEFAULT_CONTEXT_SIZE) -> List[Hunk]:
    """
    Return the display hunks turning `original` into `modified`.
    """

    validate_context_size(context_size)
    script = compute_edit_script(split_lines(original), split_lines(modified))
    return segment(script, context_size)


def diff_file_pair(file_diff: FileDiff, context_size: int = DEFAULT_CONTEXT_SIZE) -> List[Hunk]:
    """
    Diff a FileDiff, honouring its status.

    An added file has no original side and a deleted file has no
    modified side, whatever the corresponding text holds.
    """

    original = "" if file_diff.status == "added" else file_diff.original
    modified = "" if file_diff.status == "deleted" else file_diff.modified
    return diff_file(original, modified, context_size)


def is_binary(data: bytes) -> bool:
    return b"\0" in data[:_BINARY_SNIFF_BYTES]


def decode_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def diff_snapshots(
    store: SnapshotStore,
    base: str,
    target: str,
    context_size: int = DEFAULT_CONTEXT_SIZE,
    max_workers: Optional[int] = None,
) -> SnapshotDiff:
    """
    Diff every changed file between two snapshots.

    Files are read and segmented on a thread pool; the returned outcomes
    follow the order in which diff_trees() reported the paths.
    """

    validate_context_size(context_size)
    if max_workers is not None and max_workers <= 0:
        raise InvalidArgumentError(f"max_workers must be > 0, got {max_workers}")

    tree_diff = diff_trees(store, base, target)
    changes = tree_diff.changes

    outcomes: List[Optional[FileDiffOutcome]] = [None] * len(changes)
    if changes:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(
                    _diff_changed_file,
                    store,
                    tree_diff.base_id,
                    tree_diff.target_id,
                    record,
                    context_size,
                ): index
                for index, record in enumerate(changes)
            }
            for future, index in futures.items():
                outcomes[index] = future.result()

    files = [outcome for outcome in outcomes if outcome is not None]
    failed = sum(1 for outcome in files if not outcome.ok)
    if failed:
        LOG.warning("%d of %d files could not be diffed", failed, len(files))

    return SnapshotDiff(base=base, target=target, files=files, warnings=list(tree_diff.warnings))


def _diff_changed_file(
    store: SnapshotStore,
    base_id: str,
    target_id: str,
    record: ChangeRecord,
    context_size: int,
) -> FileDiffOutcome:
    LOG.debug("Diffing %s (%s)", record.path, record.status)
    try:
        old = store.read_blob(base_id, record.path) if record.status != "added" else b""
        new = store.read_blob(target_id, record.path) if record.status != "deleted" else b""
    except BlobReadError as exc:
        LOG.warning("Diff unavailable for %s: %s", record.path, exc)
        return FileDiffOutcome(path=record.path, status=record.status, error=str(exc))

    if is_binary(old) or is_binary(new):
        return FileDiffOutcome(path=record.path, status=record.status, is_binary=True)

    file_diff = FileDiff(
        path=record.path,
        original=decode_text(old),
        modified=decode_text(new),
        status=record.status,
    )
    return FileDiffOutcome(
        path=record.path,
        status=record.status,
        hunks=diff_file_pair(file_diff, context_size),
    )
