"""Per-line edit timestamps that follow their lines as documents change."""

from line_timestamps.diff import EditOp, compute_edit_script
from line_timestamps.engine import TimestampEngine
from line_timestamps.errors import (
    DeserializationError,
    MalformedEditScript,
    StorageUnavailable,
    TimestampError,
)
from line_timestamps.models import StoreSnapshot
from line_timestamps.store import TimestampStore

__all__ = [
    "DeserializationError",
    "EditOp",
    "MalformedEditScript",
    "StorageUnavailable",
    "StoreSnapshot",
    "TimestampEngine",
    "TimestampError",
    "TimestampStore",
    "compute_edit_script",
]
