import random
import time

import pytest

from hunkview.differ import diff_file, diff_file_pair, diff_snapshots
from hunkview.domain import FileDiff
from hunkview.errors import BlobReadError, InvalidArgumentError, SnapshotResolutionError
from hunkview.lines import split_lines
from hunkview.memory_store import InMemorySnapshotStore


def _numbered(count):
    return [f"line {i}\n" for i in range(1, count + 1)]


def _reconstruct(hunks, original, modified):
    """
    Rebuild both texts from the hunks, re-inserting elided context.

    Elided stretches must be identical on both sides, since they are
    unchanged lines.
    """

    old_lines, new_lines = split_lines(original), split_lines(modified)
    old_out, new_out = [], []
    old_pos = new_pos = 0

    for hunk in hunks:
        old_gap = old_lines[old_pos : hunk.old_start]
        new_gap = new_lines[new_pos : hunk.new_start]
        assert old_gap == new_gap
        old_out.extend(old_gap)
        new_out.extend(new_gap)

        old_out.extend(hunk.old_lines())
        new_out.extend(hunk.new_lines())
        old_pos = hunk.old_start + hunk.old_count
        new_pos = hunk.new_start + hunk.new_count

    assert old_lines[old_pos:] == new_lines[new_pos:]
    old_out.extend(old_lines[old_pos:])
    new_out.extend(new_lines[new_pos:])
    return "".join(old_out), "".join(new_out)


def test_diff_file_single_replacement():
    hunks = diff_file("a\nb\nc\n", "a\nx\nc\n", context_size=3)
    assert len(hunks) == 1
    assert [(run.kind, run.lines) for run in hunks[0].runs] == [
        ("unchanged", ["a\n"]),
        ("removed", ["b\n"]),
        ("added", ["x\n"]),
        ("unchanged", ["c\n"]),
    ]


def test_single_change_in_large_file_shows_only_nearby_lines():
    original = _numbered(100)
    modified = list(original)
    modified[49] = "changed 50\n"

    hunks = diff_file("".join(original), "".join(modified), context_size=3)

    assert len(hunks) == 1
    hunk = hunks[0]
    # Lines 47-53: three lines of context on each side of line 50.
    assert hunk.old_start == 46
    assert hunk.old_count == 7
    assert hunk.old_lines() == original[46:53]
    assert hunk.new_lines() == modified[46:53]


def test_distant_changes_produce_two_hunks_with_gap():
    original = _numbered(100)
    modified = list(original)
    modified[9] = "changed 10\n"
    modified[89] = "changed 90\n"

    hunks = diff_file("".join(original), "".join(modified), context_size=3)

    assert len(hunks) == 2
    assert [h.gap_before for h in hunks] == [False, True]
    assert hunks[0].old_lines() == original[6:13]
    assert hunks[1].old_lines() == original[86:93]


@pytest.mark.parametrize("gap,expected_hunks", [(5, 1), (6, 1), (7, 2), (30, 2)])
def test_gap_rule_between_two_changes(gap, expected_hunks):
    original = _numbered(gap + 20)
    modified = list(original)
    modified[10] = "first\n"
    modified[11 + gap] = "second\n"

    hunks = diff_file("".join(original), "".join(modified), context_size=3)

    assert len(hunks) == expected_hunks
    if expected_hunks == 2:
        assert hunks[1].gap_before


def test_identical_input_has_no_hunks():
    for text in ["", "x", "a\nb\n", "".join(_numbered(300))]:
        assert diff_file(text, text) == []


def test_diff_file_rejects_negative_context():
    with pytest.raises(InvalidArgumentError):
        diff_file("a\n", "b\n", context_size=-2)


@pytest.mark.parametrize("seed", range(30))
@pytest.mark.parametrize("context_size", [0, 1, 3])
def test_hunks_reconstruct_both_texts(seed, context_size):
    rng = random.Random(seed)
    alphabet = ["alpha\n", "beta\n", "gamma\n", "delta\n", "\n"]
    original_lines = [rng.choice(alphabet) for _ in range(rng.randint(0, 60))]
    modified_lines = list(original_lines)
    for _ in range(rng.randint(0, 6)):
        position = rng.randint(0, len(modified_lines))
        if modified_lines and rng.random() < 0.5:
            del modified_lines[min(position, len(modified_lines) - 1)]
        else:
            modified_lines.insert(position, rng.choice(alphabet))
    original = "".join(original_lines)
    modified = "".join(modified_lines)
    if rng.random() < 0.3:
        modified += "tail without newline"

    hunks = diff_file(original, modified, context_size=context_size)

    assert _reconstruct(hunks, original, modified) == (original, modified)
    for index, hunk in enumerate(hunks):
        assert any(run.is_change for run in hunk.runs)
        assert hunk.gap_before == (index > 0)
        unchanged = [run for run in hunk.runs if not run.is_change]
        for run in unchanged:
            assert len(run.lines) <= 2 * context_size
        if not hunk.runs[0].is_change:
            assert len(hunk.runs[0].lines) <= context_size
        if not hunk.runs[-1].is_change:
            assert len(hunk.runs[-1].lines) <= context_size


def test_diff_file_pair_uses_status_for_absent_sides():
    added = FileDiff(path="new.txt", original="stale\n", modified="fresh\n", status="added")
    hunks = diff_file_pair(added)
    assert [(run.kind, run.lines) for run in hunks[0].runs] == [("added", ["fresh\n"])]

    deleted = FileDiff(path="old.txt", original="bye\n", modified="ignored\n", status="deleted")
    hunks = diff_file_pair(deleted)
    assert [(run.kind, run.lines) for run in hunks[0].runs] == [("removed", ["bye\n"])]


def _store(store_class=InMemorySnapshotStore):
    store = store_class()
    store.add_snapshot(
        "main",
        {
            "src/app.py": "".join(_numbered(40)),
            "docs/old.md": "obsolete\n",
            "empty.txt": "",
            "logo.png": b"\x89PNG\x00\x01",
        },
    )
    feature = "".join(_numbered(40)).replace("line 20\n", "line twenty\n")
    store.add_snapshot(
        "feature",
        {
            "src/app.py": feature,
            "src/new.py": "print('hi')\n",
            "empty.txt": "",
            "logo.png": b"\x89PNG\x00\x02",
            "blank.txt": "",
        },
    )
    return store


def test_diff_snapshots_returns_outcomes_in_walk_order():
    result = diff_snapshots(_store(), "main", "feature")

    assert [(f.path, f.status) for f in result.files] == [
        ("blank.txt", "added"),
        ("docs/old.md", "deleted"),
        ("logo.png", "modified"),
        ("src/app.py", "modified"),
        ("src/new.py", "added"),
    ]
    by_path = {f.path: f for f in result.files}

    assert all(f.ok for f in result.files)
    assert by_path["blank.txt"].hunks == []
    assert by_path["logo.png"].is_binary
    assert by_path["logo.png"].hunks == []

    app = by_path["src/app.py"]
    assert len(app.hunks) == 1
    assert app.hunks[0].old_start == 16

    assert [run.kind for run in by_path["docs/old.md"].hunks[0].runs] == ["removed"]
    assert [run.kind for run in by_path["src/new.py"].hunks[0].runs] == ["added"]


def test_diff_snapshots_is_the_same_with_one_worker():
    parallel = diff_snapshots(_store(), "main", "feature", max_workers=4)
    serial = diff_snapshots(_store(), "main", "feature", max_workers=1)
    assert parallel.files == serial.files


class _FlakyStore(InMemorySnapshotStore):
    def read_blob(self, snapshot, path):
        if path == "src/app.py":
            raise BlobReadError("object store is corrupt")
        return super().read_blob(snapshot, path)


def test_unreadable_file_does_not_abort_other_files():
    result = diff_snapshots(_store(_FlakyStore), "main", "feature")

    by_path = {f.path: f for f in result.files}
    assert not by_path["src/app.py"].ok
    assert "object store is corrupt" in by_path["src/app.py"].error
    assert by_path["src/new.py"].ok
    assert [f.path for f in result.failed] == ["src/app.py"]


def test_diff_snapshots_validates_arguments():
    with pytest.raises(InvalidArgumentError):
        diff_snapshots(_store(), "main", "feature", context_size=-1)
    with pytest.raises(InvalidArgumentError):
        diff_snapshots(_store(), "main", "feature", max_workers=0)
    with pytest.raises(SnapshotResolutionError):
        diff_snapshots(_store(), "main", "nope")


def test_rewritten_large_file_is_one_hunk():
    original = "".join(f"old {i}\n" for i in range(10000))
    modified = "".join(f"new {i}\n" for i in range(10000))

    started = time.perf_counter()
    hunks = diff_file(original, modified)
    elapsed = time.perf_counter() - started

    assert len(hunks) == 1
    assert (hunks[0].old_count, hunks[0].new_count) == (10000, 10000)
    assert _reconstruct(hunks, original, modified) == (original, modified)
    assert elapsed < 5.0
