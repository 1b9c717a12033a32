"""
Line-level edit scripts.

compute_edit_script() classifies the lines of two texts into unchanged,
removed and added runs using Myers' O(ND) algorithm in its linear-space
form: the middle snake of each subproblem splits it in two, and both
halves are solved recursively. The number of removed plus added lines is
minimal. Unchanged lines are never reordered and adjacent runs of the
same kind are always coalesced.

Lines that occur on only one side can never be unchanged, so they are
set aside before the search. A file that is rewritten from scratch then
costs no search at all.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .domain import LineRun, RunKind

# (index in original, index in modified) of an unchanged line
_Match = Tuple[int, int]


def compute_edit_script(original: Sequence[str], modified: Sequence[str]) -> List[LineRun]:
    """
    Return the coalesced runs that turn `original` into `modified`.

    Removed lines are taken from `original`, unchanged and added lines
    from `modified`. Inside a changed region removed lines come before
    added lines.
    """

    return _runs_from_matches(_matching_lines(original, modified), original, modified)


def _matching_lines(original: Sequence[str], modified: Sequence[str]) -> List[_Match]:
    """
    Return the index pairs of a longest common subsequence, in order.
    """

    in_original = set(original)
    in_modified = set(modified)
    a_index = [i for i, line in enumerate(original) if line in in_modified]
    b_index = [j for j, line in enumerate(modified) if line in in_original]
    a = [original[i] for i in a_index]
    b = [modified[j] for j in b_index]

    matches: List[_Match] = []
    _common_subsequence(a, b, 0, len(a), 0, len(b), matches)
    return [(a_index[i], b_index[j]) for i, j in matches]


def _common_subsequence(
    a: Sequence[str],
    b: Sequence[str],
    a_lo: int,
    a_hi: int,
    b_lo: int,
    b_hi: int,
    out: List[_Match],
) -> None:
    while a_lo < a_hi and b_lo < b_hi and a[a_lo] == b[b_lo]:
        out.append((a_lo, b_lo))
        a_lo += 1
        b_lo += 1

    suffix = 0
    while (
        a_lo < a_hi - suffix
        and b_lo < b_hi - suffix
        and a[a_hi - 1 - suffix] == b[b_hi - 1 - suffix]
    ):
        suffix += 1
    a_end = a_hi - suffix
    b_end = b_hi - suffix

    if a_lo < a_end and b_lo < b_end:
        split = _middle_snake(a, b, a_lo, a_end, b_lo, b_end)
        if split is not None:
            x, y = split
            _common_subsequence(a, b, a_lo, a_lo + x, b_lo, b_lo + y, out)
            _common_subsequence(a, b, a_lo + x, a_end, b_lo + y, b_end, out)

    out.extend((a_end + t, b_end + t) for t in range(suffix))


def _middle_snake(
    a: Sequence[str],
    b: Sequence[str],
    a_lo: int,
    a_hi: int,
    b_lo: int,
    b_hi: int,
) -> Optional[Tuple[int, int]]:
    """
    Find a point on a shortest edit path through a[a_lo:a_hi] and
    b[b_lo:b_hi], relative to (a_lo, b_lo).

    Runs the forward search from the top-left corner and the backward
    search from the bottom-right corner until they overlap on a
    diagonal. Returns None when the ranges share no line at all.
    Both ranges must be non-empty and must differ in their first and
    last lines.
    """

    n = a_hi - a_lo
    m = b_hi - b_lo
    max_d = (n + m + 1) // 2
    offset = max_d
    size = 2 * max_d + 2

    # Furthest x reached on each diagonal k = x - y. The backward array
    # counts x and y from the bottom-right corner.
    forward = [-1] * size
    backward = [-1] * size
    forward[offset + 1] = 0
    backward[offset + 1] = 0

    delta = n - m
    # With an odd delta the paths meet during a forward step, otherwise
    # during a backward step.
    odd = delta % 2 != 0

    # Diagonals that left the box are not extended again.
    f_start = f_end = b_start = b_end = 0

    for d in range(max_d):
        for k in range(-d + f_start, d + 1 - f_end, 2):
            i = offset + k
            if k == -d or (k != d and forward[i - 1] < forward[i + 1]):
                x = forward[i + 1]
            else:
                x = forward[i - 1] + 1
            y = x - k
            while x < n and y < m and a[a_lo + x] == b[b_lo + y]:
                x += 1
                y += 1
            forward[i] = x
            if x > n:
                f_end += 2
            elif y > m:
                f_start += 2
            elif odd:
                j = offset + delta - k
                if 0 <= j < size and backward[j] != -1 and x >= n - backward[j]:
                    return x, y

        for k in range(-d + b_start, d + 1 - b_end, 2):
            i = offset + k
            if k == -d or (k != d and backward[i - 1] < backward[i + 1]):
                x = backward[i + 1]
            else:
                x = backward[i - 1] + 1
            y = x - k
            while x < n and y < m and a[a_hi - 1 - x] == b[b_hi - 1 - y]:
                x += 1
                y += 1
            backward[i] = x
            if x > n:
                b_end += 2
            elif y > m:
                b_start += 2
            elif not odd:
                j = offset + delta - k
                if 0 <= j < size and forward[j] != -1:
                    fx = forward[j]
                    if fx >= n - x:
                        return fx, fx - (j - offset)

    return None


def _runs_from_matches(
    matches: List[_Match], original: Sequence[str], modified: Sequence[str]
) -> List[LineRun]:
    """
    Turn matched line pairs into runs.

    The lines between two consecutive matches form one changed region:
    its removed lines are emitted ahead of its added lines.
    """

    runs: List[LineRun] = []

    def emit(kind: RunKind, lines: Sequence[str]) -> None:
        if not lines:
            return
        if runs and runs[-1].kind == kind:
            runs[-1].lines.extend(lines)
        else:
            runs.append(LineRun(kind=kind, lines=list(lines)))

    old_pos = new_pos = 0
    for old_index, new_index in matches:
        emit("removed", original[old_pos:old_index])
        emit("added", modified[new_pos:new_index])
        emit("unchanged", modified[new_index : new_index + 1])
        old_pos = old_index + 1
        new_pos = new_index + 1

    emit("removed", original[old_pos:])
    emit("added", modified[new_pos:])
    return runs
