"""Tests for remapping timestamps across an edit script."""

import pytest

from line_timestamps.diff import EditOp, compute_edit_script
from line_timestamps.errors import MalformedEditScript
from line_timestamps.store.remap import count_changed_lines, remap_entries

T1 = "2024-01-01T00:00:00.000Z"
T2 = "2024-01-02T00:00:00.000Z"
NOW = "2024-06-01T12:00:00.000Z"


def remap(entries: dict[int, str], old: list[str], new: list[str], now: str = NOW) -> dict[int, str]:
    return remap_entries(entries, compute_edit_script(old, new), len(old), len(new), now)


class TestRemapEntries:
    """Tests for remap_entries function."""

    def test_insert_before_line(self) -> None:
        """Inserting a line should stamp it and shift the lines after it."""
        entries = {0: T1, 1: T1, 2: T1}
        result = remap(entries, ["a", "b", "c"], ["a", "x", "b", "c"])
        assert result == {0: T1, 1: NOW, 2: T1, 3: T1}

    def test_replace_in_place(self) -> None:
        """Editing a line in place should restamp only that line."""
        entries = {0: T1, 1: T1, 2: T1}
        result = remap(entries, ["a", "b", "c"], ["a", "B", "c"])
        assert result == {0: T1, 1: NOW, 2: T1}

    def test_pure_shift_keeps_earlier_lines(self) -> None:
        """Lines before an insertion should keep index and timestamp."""
        old = [f"line {i}" for i in range(10)]
        entries = {i: (T1 if i % 2 else T2) for i in range(10)}
        new = old[:4] + ["new"] + old[4:]

        result = remap(entries, old, new)

        for i in range(4):
            assert result[i] == entries[i]
        assert result[4] == NOW
        for i in range(4, 10):
            assert result[i + 1] == entries[i]

    def test_deletion_drops_exactly_its_range(self) -> None:
        """Deleting [i, j) should drop those entries and shift later ones down."""
        old = [f"line {i}" for i in range(8)]
        entries = {i: f"2024-01-0{i + 1}T00:00:00.000Z" for i in range(8)}
        new = old[:2] + old[5:]

        result = remap(entries, old, new)

        assert result == {
            0: entries[0],
            1: entries[1],
            2: entries[5],
            3: entries[6],
            4: entries[7],
        }
        assert NOW not in result.values()

    def test_identical_content_is_unchanged(self) -> None:
        """Remapping across no change should return the same entries."""
        entries = {0: T1, 2: T2}
        lines = ["a", "b", "c"]
        assert remap(entries, lines, list(lines)) == entries

    def test_unstamped_equal_lines_stay_unstamped(self) -> None:
        """Shifted lines without history should not gain a timestamp."""
        result = remap({0: T1}, ["a", "b"], ["x", "a", "b"])
        assert result == {0: NOW, 1: T1}

    def test_stale_entries_are_pruned(self) -> None:
        """Entries beyond the old content length should be dropped."""
        result = remap({0: T1, 1: T1, 7: T2}, ["a", "b"], ["a", "b"])
        assert result == {0: T1, 1: T1}

    def test_empty_old_stamps_everything(self) -> None:
        """Diffing against empty content should stamp every line."""
        result = remap({}, [], ["a", "b", "c"])
        assert result == {0: NOW, 1: NOW, 2: NOW}

    def test_empty_new_drops_everything(self) -> None:
        """Clearing a document should leave no entries."""
        assert remap({0: T1, 1: T1}, ["a", "b"], []) == {}

    def test_result_is_ordered(self) -> None:
        """The remapped entries should be ordered by line index."""
        result = remap({0: T1, 1: T1}, ["a", "b"], ["x", "a", "y", "b", "z"])
        assert list(result) == sorted(result)

    def test_rejects_malformed_script(self) -> None:
        """A script that does not cover both contents should raise."""
        script = [EditOp("equal", 0, 1, 0, 1)]
        with pytest.raises(MalformedEditScript):
            remap_entries({0: T1}, script, 3, 3, NOW)

    def test_does_not_mutate_input(self) -> None:
        """The prior entry map should be left untouched."""
        entries = {0: T1, 1: T1}
        remap(entries, ["a", "b"], ["b"])
        assert entries == {0: T1, 1: T1}


class TestCountChangedLines:
    """Tests for count_changed_lines function."""

    def test_counts_stamped_and_dropped(self) -> None:
        """Should count new lines stamped and old lines dropped."""
        script = compute_edit_script(["a", "b", "c", "d"], ["a", "B", "d", "e"])
        assert count_changed_lines(script) == (2, 2)

    def test_no_changes(self) -> None:
        """An all-equal script should count nothing."""
        assert count_changed_lines(compute_edit_script(["a"], ["a"])) == (0, 0)
