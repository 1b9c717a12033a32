"""
Abstract interface for snapshot stores.

The tree differ and the multi-file differ only talk to a SnapshotStore,
so a git repository, an in-memory fixture or any other content-addressed
tree source can be plugged in without touching the core.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from .domain import TreeEntry


class SnapshotStore(ABC):
    """
    Read-only access to named, immutable file tree snapshots.
    """

    @abstractmethod
    def resolve_snapshot(self, name: str) -> str:
        """
        Resolve a snapshot name (branch, tag, commit or tree id) to a
        handle accepted by the other methods.

        Raises UnresolvedReferenceError when the name does not exist.
        """

    @abstractmethod
    def list_entries(self, snapshot: str, path: str) -> List[TreeEntry]:
        """
        Return the children of the directory at `path` ("" is the root).

        Raises TreeWalkError when the directory cannot be read.
        """

    @abstractmethod
    def read_blob(self, snapshot: str, path: str) -> bytes:
        """
        Return the raw content of the file at `path`.

        Raises BlobNotFoundError when the path does not exist in the
        snapshot and BlobReadError for any other read failure.
        """
