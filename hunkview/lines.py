"""
Line splitting shared by the edit script and reconstruction checks.
"""

from __future__ import annotations

from typing import Iterable, List


def split_lines(text: str) -> List[str]:
    """
    Split text after every newline, keeping the terminator on each line.

    A final line without a terminator is returned as-is. The empty
    string yields no lines at all.
    """

    if not text:
        return []

    lines = text.split("\n")
    result = [line + "\n" for line in lines[:-1]]
    # split() leaves "" after a trailing newline; anything else is an
    # unterminated last line.
    if lines[-1]:
        result.append(lines[-1])
    return result


def join_lines(lines: Iterable[str]) -> str:
    return "".join(lines)
