"""
Configuration model for hunkview.

The CLI constructs a Config instance and passes it down into the diff
entry points so behavior can be adjusted without relying on global
state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .hunks import DEFAULT_CONTEXT_SIZE


@dataclass
class Config:
    """
    Top-level configuration for a hunkview run.
    """

    base: str
    target: str
    repo: Optional[str] = None
    context_size: int = DEFAULT_CONTEXT_SIZE
    name_status: bool = False
    max_workers: Optional[int] = None
    verbosity: int = 0
