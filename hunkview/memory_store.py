"""
In-memory snapshot store.

Snapshots are registered as flat {path: content} mappings and turned
into nested trees. Blob content ids are computed the way git hashes blob
objects, so two stores (or two snapshots) holding the same bytes agree
on identity.
"""

from __future__ import annotations

import hashlib
from typing import Dict, List, Mapping, Union

from .domain import TreeEntry
from .errors import BlobNotFoundError, TreeWalkError, UnresolvedReferenceError
from .store import SnapshotStore

Content = Union[str, bytes]
# Nested directory: name -> bytes (a file) or another directory.
_Tree = Dict[str, Union[bytes, "_Tree"]]


def hash_blob(content: bytes) -> str:
    """
    Return the git blob object id for content.
    """

    header = f"blob {len(content)}\0".encode()
    return hashlib.sha1(header + content).hexdigest()


class InMemorySnapshotStore(SnapshotStore):
    """
    A SnapshotStore backed by Python dictionaries.
    """

    def __init__(self) -> None:
        self._snapshots: Dict[str, _Tree] = {}

    def add_snapshot(self, name: str, files: Mapping[str, Content]) -> None:
        """
        Register (or replace) a snapshot from a {path: content} mapping.

        Paths use "/" separators; intermediate directories are implied.
        """

        root: _Tree = {}
        for path, content in files.items():
            parts = [part for part in path.strip("/").split("/") if part not in ("", ".")]
            if not parts:
                raise ValueError(f"invalid snapshot path {path!r}")

            node = root
            for part in parts[:-1]:
                child = node.setdefault(part, {})
                if not isinstance(child, dict):
                    raise ValueError(f"path {path!r} runs through file {part!r}")
                node = child

            data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
            if isinstance(node.get(parts[-1]), dict):
                raise ValueError(f"path {path!r} is already a directory")
            node[parts[-1]] = data

        self._snapshots[name] = root

    def resolve_snapshot(self, name: str) -> str:
        if name not in self._snapshots:
            raise UnresolvedReferenceError(f"unknown snapshot {name!r}")
        return name

    def list_entries(self, snapshot: str, path: str) -> List[TreeEntry]:
        node = self._lookup(snapshot, path)
        if not isinstance(node, dict):
            raise TreeWalkError(path, "not a directory")

        entries: List[TreeEntry] = []
        for name, child in node.items():
            if isinstance(child, dict):
                entries.append(TreeEntry(name=name, kind="tree", content_id=None))
            else:
                entries.append(TreeEntry(name=name, kind="blob", content_id=hash_blob(child)))
        return entries

    def read_blob(self, snapshot: str, path: str) -> bytes:
        try:
            node = self._lookup(snapshot, path)
        except TreeWalkError as exc:
            raise BlobNotFoundError(f"{path} not found in snapshot {snapshot!r}") from exc
        if isinstance(node, dict):
            raise BlobNotFoundError(f"{path} is a directory in snapshot {snapshot!r}")
        return node

    def _lookup(self, snapshot: str, path: str) -> Union[bytes, _Tree]:
        if snapshot not in self._snapshots:
            raise UnresolvedReferenceError(f"unknown snapshot {snapshot!r}")

        node: Union[bytes, _Tree] = self._snapshots[snapshot]
        for part in [p for p in path.split("/") if p]:
            if not isinstance(node, dict) or part not in node:
                raise TreeWalkError(path, "no such entry")
            node = node[part]
        return node
