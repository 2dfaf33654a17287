"""Timestamp store persistence and remapping."""

from .remap import remap_entries
from .storage import BlobStorage, LocalStorage
from .timestamps import TimestampStore

__all__ = [
    "BlobStorage",
    "LocalStorage",
    "TimestampStore",
    "remap_entries",
]
