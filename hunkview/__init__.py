"""
hunkview: compare two file tree snapshots and present changed files as
context-bounded hunks.
"""

from __future__ import annotations

from .differ import diff_file, diff_file_pair, diff_snapshots
from .hunks import segment
from .tree_differ import diff_trees

__all__ = ["diff_file", "diff_file_pair", "diff_snapshots", "diff_trees", "segment"]
