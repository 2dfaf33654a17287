"""Change detection for watched documents.

Uses modification time and size as a cheap pre-check and a SHA-256
content hash as the final word.
"""

import hashlib
from dataclasses import dataclass
from pathlib import Path


@dataclass
class FileFingerprint:
    """Last observed state of a watched document."""

    mtime_ns: int
    size: int
    sha256: str


def compute_sha256(path: Path) -> str:
    """Compute SHA-256 hash of a file.

    Args:
        path: Path to file to hash

    Returns:
        Hex-encoded SHA-256 hash string
    """
    hasher = hashlib.sha256()
    with open(path, "rb") as f:
        # Read in chunks for memory efficiency with large files
        for chunk in iter(lambda: f.read(65536), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def needs_update(
    path: Path,
    previous: FileFingerprint | None,
) -> tuple[bool, str, FileFingerprint | None]:
    """Check if a document changed since it was last fingerprinted.

    Args:
        path: Path to the document
        previous: Fingerprint from the last cycle (None if never seen)

    Returns:
        Tuple of (changed, reason, current_fingerprint)
        - changed: True if the engine should be notified
        - reason: 'file_not_found', 'new_file', 'content_changed' or 'up_to_date'
        - current_fingerprint: None when the file is gone
    """
    if not path.exists():
        return False, "file_not_found", None

    stat = path.stat()

    # Unchanged metadata: skip hashing
    if previous is not None and stat.st_mtime_ns == previous.mtime_ns and stat.st_size == previous.size:
        return False, "up_to_date", previous

    current = FileFingerprint(mtime_ns=stat.st_mtime_ns, size=stat.st_size, sha256=compute_sha256(path))

    if previous is None:
        return True, "new_file", current

    # Touched or rewritten with identical bytes
    if current.sha256 == previous.sha256:
        return False, "up_to_date", current

    return True, "content_changed", current
