"""
Custom exception types used across hunkview.

Defining explicit error classes makes it easier for the CLI and callers
to tell a fatal failure (an unresolvable snapshot) from a per-file one
(a blob that could not be read) and from unexpected bugs.
"""

from __future__ import annotations

from typing import Optional


class HunkviewError(Exception):
    """Base class for all hunkview specific errors."""


class SnapshotResolutionError(HunkviewError):
    """Raised when a snapshot cannot be resolved to a root tree."""

    def __init__(self, name: str, reason: Optional[str] = None) -> None:
        message = f"cannot resolve snapshot {name!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.name = name


class UnresolvedReferenceError(HunkviewError):
    """Raised by a snapshot store when a snapshot name does not exist."""


class TreeWalkError(HunkviewError):
    """
    Raised when a single tree entry cannot be read.

    The tree differ treats this as recoverable: the entry is skipped and
    reported as a warning on the result.
    """

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path or '.'}: {message}")
        self.path = path


class BlobReadError(HunkviewError):
    """Raised when the content of one file cannot be read."""


class BlobNotFoundError(BlobReadError):
    """Raised when a path does not exist in a snapshot."""


class InvalidArgumentError(HunkviewError, ValueError):
    """Raised when a caller passes an out-of-range argument."""


class GitError(HunkviewError):
    """Raised when git operations fail."""
