"""Line-level diff between two revisions of a document.

Computes a minimal edit script with Myers' O((N+M)D) shortest edit
script algorithm. Lines are compared by exact string identity.

The script is expressed as opcodes in the same shape as
difflib.SequenceMatcher.get_opcodes(): runs tagged equal, insert,
delete or replace, each carrying half-open ranges into the old and new
line sequences.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from line_timestamps.errors import MalformedEditScript
from line_timestamps.logging import get_logger

logger = get_logger("diff")

# Longest edit script traced in full; the trace needs memory quadratic in it
MAX_EDIT_DISTANCE = 1000

OpTag = Literal["equal", "insert", "delete", "replace"]


@dataclass(frozen=True)
class EditOp:
    """One run of an edit script.

    Ranges are half-open: old lines [old_start, old_end) become new
    lines [new_start, new_end).
    """

    tag: OpTag
    old_start: int
    old_end: int
    new_start: int
    new_end: int

    @property
    def old_range(self) -> range:
        return range(self.old_start, self.old_end)

    @property
    def new_range(self) -> range:
        return range(self.new_start, self.new_end)

    def to_opcode(self) -> tuple[str, int, int, int, int]:
        """Return the op as a (tag, i1, i2, j1, j2) tuple."""
        return (self.tag, self.old_start, self.old_end, self.new_start, self.new_end)


def compute_edit_script(old_lines: Sequence[str], new_lines: Sequence[str]) -> list[EditOp]:
    """Compute the minimal edit script turning old_lines into new_lines.

    The common prefix and suffix are matched first; Myers' algorithm runs
    only on the differing middle. Results are deterministic for identical
    inputs.

    When the middle needs more than MAX_EDIT_DISTANCE inserted plus deleted
    lines, or shares no line at all, it is reported as a single replace.
    Such a script is still valid but may stamp lines a minimal script
    would have kept.

    Args:
        old_lines: Previous document content, one string per line
        new_lines: Current document content, one string per line

    Returns:
        Ordered list of EditOp runs covering both sequences. Empty when
        both inputs are empty.
    """
    old_len = len(old_lines)
    new_len = len(new_lines)

    prefix = 0
    limit = min(old_len, new_len)
    while prefix < limit and old_lines[prefix] == new_lines[prefix]:
        prefix += 1

    suffix = 0
    limit -= prefix
    while suffix < limit and old_lines[old_len - 1 - suffix] == new_lines[new_len - 1 - suffix]:
        suffix += 1

    # Intern lines as integers so the inner loop compares ints, not strings
    ids: dict[str, int] = {}
    old_middle = [ids.setdefault(line, len(ids)) for line in old_lines[prefix : old_len - suffix]]
    new_middle = [ids.setdefault(line, len(ids)) for line in new_lines[prefix : new_len - suffix]]

    if set(old_middle).isdisjoint(new_middle):
        matches: list[tuple[int, int]] = []
    else:
        matches = _myers_matches(old_middle, new_middle)

    script: list[EditOp] = []
    if prefix:
        script.append(EditOp("equal", 0, prefix, 0, prefix))
    script.extend(
        _matches_to_ops(matches, len(old_middle), len(new_middle), offset_old=prefix, offset_new=prefix)
    )
    if suffix:
        script.append(EditOp("equal", old_len - suffix, old_len, new_len - suffix, new_len))

    return _merge_adjacent(script)


def _myers_matches(a: list[int], b: list[int]) -> list[tuple[int, int]]:
    """Return the matched (old, new) index pairs of a shortest edit script."""
    n, m = len(a), len(b)
    if n == 0 or m == 0:
        return []

    max_d = n + m
    offset = max_d + 1
    v = [0] * (2 * max_d + 3)
    # trace[d] holds the furthest-reaching x per diagonal before round d,
    # stored as the slice for diagonals [-d, d]
    trace: list[list[int]] = []

    for d in range(min(max_d, MAX_EDIT_DISTANCE) + 1):
        trace.append(v[offset - d : offset + d + 1])
        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and v[offset + k - 1] < v[offset + k + 1]):
                x = v[offset + k + 1]
            else:
                x = v[offset + k - 1] + 1
            y = x - k
            while x < n and y < m and a[x] == b[y]:
                x += 1
                y += 1
            v[offset + k] = x
            if x >= n and y >= m:
                return _backtrack(trace, n, m)

    logger.debug("Edit distance above %d, replacing %d old lines with %d new", MAX_EDIT_DISTANCE, n, m)
    return []


def _backtrack(trace: list[list[int]], n: int, m: int) -> list[tuple[int, int]]:
    matches: list[tuple[int, int]] = []
    x, y = n, m

    for d in range(len(trace) - 1, -1, -1):
        previous = trace[d]
        k = x - y

        if d == 0:
            while x > 0 and y > 0:
                x -= 1
                y -= 1
                matches.append((x, y))
            break

        def furthest(diagonal: int) -> int:
            return previous[diagonal + d]

        if k == -d or (k != d and furthest(k - 1) < furthest(k + 1)):
            prev_k = k + 1
        else:
            prev_k = k - 1
        prev_x = furthest(prev_k)
        prev_y = prev_x - prev_k

        while x > prev_x and y > prev_y:
            x -= 1
            y -= 1
            matches.append((x, y))

        x, y = prev_x, prev_y

    matches.reverse()
    return matches


def _matches_to_ops(
    matches: list[tuple[int, int]],
    n: int,
    m: int,
    offset_old: int = 0,
    offset_new: int = 0,
) -> list[EditOp]:
    ops: list[EditOp] = []
    i = j = 0
    # Sentinel match at the end flushes the trailing gap
    for mi, mj in [*matches, (n, m)]:
        if mi > i or mj > j:
            if mi > i and mj > j:
                tag: OpTag = "replace"
            elif mi > i:
                tag = "delete"
            else:
                tag = "insert"
            ops.append(EditOp(tag, i + offset_old, mi + offset_old, j + offset_new, mj + offset_new))
        if mi < n:
            ops.append(EditOp("equal", mi + offset_old, mi + 1 + offset_old, mj + offset_new, mj + 1 + offset_new))
        i, j = mi + 1, mj + 1
    return ops


def _merge_adjacent(ops: list[EditOp]) -> list[EditOp]:
    """Join consecutive equal runs into a single op."""
    merged: list[EditOp] = []
    for op in ops:
        if merged and op.tag == "equal" and merged[-1].tag == "equal":
            last = merged[-1]
            merged[-1] = EditOp("equal", last.old_start, op.old_end, last.new_start, op.new_end)
        else:
            merged.append(op)
    return merged


def validate_edit_script(script: Sequence[EditOp], old_length: int, new_length: int) -> None:
    """Check that a script covers [0, old_length) and [0, new_length) exactly.

    Raises:
        MalformedEditScript: If ops overlap, leave gaps, run past either
            sequence, or carry ranges inconsistent with their tag
    """
    old_pos = new_pos = 0
    for index, op in enumerate(script):
        if op.old_start != old_pos or op.new_start != new_pos:
            raise MalformedEditScript(
                f"op {index} ({op.tag}) starts at old={op.old_start} new={op.new_start}, "
                f"expected old={old_pos} new={new_pos}"
            )
        old_span = op.old_end - op.old_start
        new_span = op.new_end - op.new_start
        if old_span < 0 or new_span < 0:
            raise MalformedEditScript(f"op {index} ({op.tag}) has a negative range")
        if op.tag == "equal" and old_span != new_span:
            raise MalformedEditScript(f"op {index} is equal but spans {old_span} old and {new_span} new lines")
        if op.tag == "insert" and (old_span != 0 or new_span == 0):
            raise MalformedEditScript(f"op {index} is insert but spans {old_span} old lines")
        if op.tag == "delete" and (new_span != 0 or old_span == 0):
            raise MalformedEditScript(f"op {index} is delete but spans {new_span} new lines")
        if op.tag == "replace" and (old_span == 0 or new_span == 0):
            raise MalformedEditScript(f"op {index} is replace but one side is empty")
        if op.tag not in ("equal", "insert", "delete", "replace"):
            raise MalformedEditScript(f"op {index} has unknown tag {op.tag!r}")
        old_pos, new_pos = op.old_end, op.new_end

    if old_pos != old_length or new_pos != new_length:
        raise MalformedEditScript(
            f"script covers old={old_pos} new={new_pos} lines, expected old={old_length} new={new_length}"
        )


def apply_edit_script(
    old_lines: Sequence[str],
    new_lines: Sequence[str],
    script: Sequence[EditOp],
) -> list[str]:
    """Rebuild the new content by copying equal runs from old_lines.

    Inserted and replaced runs are taken from new_lines.
    """
    result: list[str] = []
    for op in script:
        if op.tag == "equal":
            result.extend(old_lines[op.old_start : op.old_end])
        elif op.tag in ("insert", "replace"):
            result.extend(new_lines[op.new_start : op.new_end])
    return result
