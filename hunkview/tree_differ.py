"""
Tree differ for hunkview.

diff_trees() walks two snapshots in lock-step and reports every file
(blob) that was added, modified or deleted. The walk is depth-first and
visits the children of each directory in lexicographic order of their
names, so the same pair of snapshots always yields the same sequence.

Entries that cannot be read are skipped and reported as warnings on the
result instead of aborting the whole diff.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .domain import ChangeRecord, ChangeStatus, TreeDiffResult, TreeEntry, TreeWalkWarning
from .errors import HunkviewError, SnapshotResolutionError, TreeWalkError
from .store import SnapshotStore

LOG = logging.getLogger(__name__)

_KNOWN_KINDS = ("blob", "tree")


def diff_trees(store: SnapshotStore, base: str, target: str) -> TreeDiffResult:
    """
    Return the files that differ between the `base` and `target` snapshots.

    Raises SnapshotResolutionError when either snapshot cannot be
    resolved to a readable root tree.
    """

    base_handle = _resolve(store, base)
    target_handle = _resolve(store, target)

    walk = _LockstepWalk(store, base_handle, target_handle)
    try:
        walk.visit_dir("", in_base=True, in_target=True)
    except _RootUnreadable as exc:
        name = base if exc.snapshot == base_handle else target
        raise SnapshotResolutionError(name, f"root tree unreadable: {exc.error}") from exc.error

    LOG.info(
        "Compared %s..%s: %d changed files, %d skipped entries",
        base,
        target,
        len(walk.changes),
        len(walk.warnings),
    )
    return TreeDiffResult(
        base=base,
        target=target,
        base_id=base_handle,
        target_id=target_handle,
        changes=walk.changes,
        warnings=walk.warnings,
    )


def _resolve(store: SnapshotStore, name: str) -> str:
    try:
        return store.resolve_snapshot(name)
    except HunkviewError as exc:
        raise SnapshotResolutionError(name, str(exc)) from exc


def join_path(parent: str, name: str) -> str:
    return f"{parent}/{name}" if parent else name


class _RootUnreadable(Exception):
    def __init__(self, snapshot: str, error: TreeWalkError) -> None:
        super().__init__(str(error))
        self.snapshot = snapshot
        self.error = error


class _LockstepWalk:
    def __init__(self, store: SnapshotStore, base: str, target: str) -> None:
        self.store = store
        self.base = base
        self.target = target
        self.changes: List[ChangeRecord] = []
        self.warnings: List[TreeWalkWarning] = []

    def visit_dir(self, path: str, in_base: bool, in_target: bool) -> None:
        base_entries = self._list(self.base, path) if in_base else {}
        target_entries = self._list(self.target, path) if in_target else {}
        if base_entries is None or target_entries is None:
            # Listing only one side would misreport the other side's
            # files, so the whole directory is skipped.
            return

        for name in sorted(set(base_entries) | set(target_entries)):
            child = join_path(path, name)
            raw_old = base_entries.get(name)
            raw_new = target_entries.get(name)
            old = self._checked(child, raw_old)
            new = self._checked(child, raw_new)
            if (raw_old is not None and old is None) or (raw_new is not None and new is None):
                continue

            old_kind = old.kind if old is not None else None
            new_kind = new.kind if new is not None else None
            old_id = old.content_id if old is not None else None
            new_id = new.content_id if new is not None else None

            if old_kind == "blob" and new_kind == "blob":
                if old_id != new_id:
                    self._emit(child, "modified")
            elif old_kind == "blob":
                self._emit(child, "deleted")
            elif new_kind == "blob":
                self._emit(child, "added")

            old_tree = old_kind == "tree"
            new_tree = new_kind == "tree"
            if old_tree and new_tree and old_id is not None and old_id == new_id:
                continue
            if old_tree or new_tree:
                self.visit_dir(child, in_base=old_tree, in_target=new_tree)

    def _list(self, snapshot: str, path: str) -> Optional[Dict[str, TreeEntry]]:
        """
        Return the entries of a directory by name, or None (with a
        warning recorded) when it cannot be listed.
        """

        try:
            entries = self.store.list_entries(snapshot, path)
        except TreeWalkError as exc:
            if not path:
                raise _RootUnreadable(snapshot, exc) from exc
            self._warn(path, f"cannot list directory: {exc}")
            return None
        return {entry.name: entry for entry in entries}

    def _checked(self, path: str, entry: Optional[TreeEntry]) -> Optional[TreeEntry]:
        """
        Return entry if the walk can use it, else record a warning.
        """

        if entry is None:
            return None
        if entry.kind not in _KNOWN_KINDS:
            self._warn(path, f"unsupported entry kind {entry.kind!r}")
            return None
        if entry.kind == "blob" and not entry.content_id:
            self._warn(path, "blob has no content id")
            return None
        return entry

    def _emit(self, path: str, status: ChangeStatus) -> None:
        self.changes.append(ChangeRecord(path=path, status=status))

    def _warn(self, path: str, message: str) -> None:
        LOG.warning("Skipping %s: %s", path, message)
        self.warnings.append(TreeWalkWarning(path=path, message=message))
