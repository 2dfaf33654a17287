"""Blob storage backing the timestamp store.

LocalStorage writes through a temporary file in the target directory and
renames it into place, so readers never observe a partially written file.
"""

import os
from pathlib import Path
from typing import Protocol

from line_timestamps.logging import get_logger

logger = get_logger("storage")


class BlobStorage(Protocol):
    """Minimal file API the timestamp store needs from its host."""

    def read_file(self, path: Path) -> bytes | None:
        """Return the file's bytes, or None if it does not exist."""
        ...

    def write_file(self, path: Path, data: bytes) -> None:
        """Replace the file's content."""
        ...

    def ensure_directory(self, path: Path) -> None:
        """Create a directory and its parents if missing."""
        ...


class LocalStorage:
    """BlobStorage on the local filesystem."""

    def read_file(self, path: Path) -> bytes | None:
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def write_file(self, path: Path, data: bytes) -> None:
        """Atomically write data to path with the temp-file-rename pattern.

        Raises:
            OSError: On file I/O errors (the temporary file is removed)
        """
        # Same directory keeps the rename on one filesystem
        temp_path = path.parent / f".{path.name}.tmp.{os.getpid()}"

        try:
            with open(temp_path, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())

            temp_path.replace(path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink()
            raise

        logger.debug("Atomic write: path=%s bytes=%d", path, len(data))

    def ensure_directory(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)
