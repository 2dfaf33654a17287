"""Carry line timestamps across an edit script."""

from collections.abc import Mapping, Sequence

from line_timestamps.diff import EditOp, validate_edit_script
from line_timestamps.models import EntryMap


def remap_entries(
    entries: Mapping[int, str],
    script: Sequence[EditOp],
    old_length: int,
    new_length: int,
    timestamp: str,
) -> EntryMap:
    """Build the entry map for the new content from the old one.

    Equal runs keep their timestamps at shifted indices. Inserted and
    replaced lines are stamped with timestamp. Deleted and replaced old
    lines lose theirs, as do stale entries at or beyond old_length.

    Args:
        entries: Entry map recorded against the old content
        script: Edit script from old content to new content
        old_length: Line count of the old content
        new_length: Line count of the new content
        timestamp: ISO-8601 timestamp for changed lines

    Returns:
        New entry map, ordered by line index

    Raises:
        MalformedEditScript: If the script does not exactly cover both contents
    """
    validate_edit_script(script, old_length, new_length)

    remapped: EntryMap = {}
    for op in script:
        if op.tag == "equal":
            shift = op.new_start - op.old_start
            for index in op.old_range:
                stamp = entries.get(index)
                if stamp is not None:
                    remapped[index + shift] = stamp
        elif op.tag in ("insert", "replace"):
            for index in op.new_range:
                remapped[index] = timestamp
        # delete: old timestamps are dropped

    return {index: remapped[index] for index in sorted(remapped)}


def count_changed_lines(script: Sequence[EditOp]) -> tuple[int, int]:
    """Return (stamped, dropped) line counts for a script."""
    stamped = sum(len(op.new_range) for op in script if op.tag in ("insert", "replace"))
    dropped = sum(len(op.old_range) for op in script if op.tag in ("delete", "replace"))
    return stamped, dropped
