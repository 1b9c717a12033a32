"""
Git integration for hunkview.

This module implements a SnapshotStore on top of the git CLI. Snapshot
names are anything `git rev-parse` understands (branches, tags, commit
or tree ids); they are resolved to tree object ids, which are immutable,
so every later read is against exactly the same snapshot.
"""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Any, List, Optional

from .domain import TreeEntry
from .errors import (
    BlobNotFoundError,
    BlobReadError,
    GitError,
    TreeWalkError,
    UnresolvedReferenceError,
)
from .store import SnapshotStore

LOG = logging.getLogger(__name__)

# git prints one of these when a <tree>:<path> object name does not exist.
_MISSING_MARKERS = ("does not exist", "Not a valid object name", "not a valid object name")


def _run_git(
    args: list[str],
    cwd: Optional[str] = None,
    binary: bool = False,
) -> subprocess.CompletedProcess[Any]:
    """
    Run a git command and return the completed process.

    All git invocations go through this helper so that error handling
    and logging are centralized. With binary=True stdout is returned as
    bytes.
    """

    cmd = ["git", *args]
    LOG.debug("Running git command: %s", " ".join(cmd))
    try:
        completed = subprocess.run(
            cmd,
            cwd=cwd,
            check=False,
            text=not binary,
            capture_output=True,
        )
    except OSError as exc:  # noqa: BLE001
        raise GitError(f"failed to execute git: {exc}") from exc

    if completed.returncode != 0:
        stderr = completed.stderr
        if isinstance(stderr, bytes):
            stderr = stderr.decode("utf-8", errors="replace")
        stderr = (stderr or "").strip()
        LOG.debug("git stderr: %s", stderr)
        message = f"git command failed: {' '.join(cmd)}"
        if stderr:
            message = f"{message}: {stderr}"
        raise GitError(message)

    return completed


def parse_ls_tree(output: bytes) -> List[TreeEntry]:
    """
    Parse NUL-terminated `git ls-tree -z` output.

    Each record reads "<mode> <type> <object>\\t<name>". Names are raw
    bytes in git; they are decoded one record at a time with
    os.fsdecode, so a name that is not valid UTF-8 keeps its bytes (as
    surrogate escapes) and can be passed back to git unchanged.
    """

    entries: List[TreeEntry] = []
    for record in output.split(b"\0"):
        if not record:
            continue
        meta, sep, name = record.partition(b"\t")
        fields = meta.decode("ascii", errors="replace").split()
        if not sep or len(fields) != 3:
            raise ValueError(f"unexpected ls-tree record: {record!r}")
        _mode, kind, oid = fields
        entries.append(TreeEntry(name=os.fsdecode(name), kind=kind, content_id=oid))
    return entries


class GitSnapshotStore(SnapshotStore):
    """
    SnapshotStore reading trees and blobs from a git repository.

    repo is the working directory git runs in; None means the current
    directory.
    """

    def __init__(self, repo: Optional[str] = None) -> None:
        self.repo = repo

    def resolve_snapshot(self, name: str) -> str:
        try:
            completed = _run_git(["rev-parse", "--verify", f"{name}^{{tree}}"], cwd=self.repo)
        except GitError as exc:
            raise UnresolvedReferenceError(f"unknown revision {name!r}") from exc
        return completed.stdout.strip()

    def list_entries(self, snapshot: str, path: str) -> List[TreeEntry]:
        treeish = f"{snapshot}:{path}" if path else snapshot
        try:
            completed = _run_git(["ls-tree", "-z", treeish], cwd=self.repo, binary=True)
            return parse_ls_tree(completed.stdout)
        except (GitError, ValueError) as exc:
            raise TreeWalkError(path, str(exc)) from exc

    def read_blob(self, snapshot: str, path: str) -> bytes:
        try:
            completed = _run_git(["cat-file", "blob", f"{snapshot}:{path}"], cwd=self.repo, binary=True)
        except GitError as exc:
            if any(marker in str(exc) for marker in _MISSING_MARKERS):
                raise BlobNotFoundError(f"{path} not found in {snapshot}") from exc
            raise BlobReadError(f"cannot read {path} from {snapshot}: {exc}") from exc
        return completed.stdout
