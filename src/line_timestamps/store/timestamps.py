"""Durable per-document, per-line timestamp store."""

import threading
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from line_timestamps.diff import compute_edit_script
from line_timestamps.errors import DeserializationError, MalformedEditScript, StorageUnavailable
from line_timestamps.logging import get_logger
from line_timestamps.models import EntryMap, StoreSnapshot, format_timestamp
from line_timestamps.store.remap import count_changed_lines, remap_entries
from line_timestamps.store.storage import BlobStorage, LocalStorage

logger = get_logger("store")


class TimestampStore:
    """Manages the timestamp store persisted as a single JSON file.

    The file is the only source of truth. Every operation loads it in
    full, and every mutation writes it back in full before returning.
    A single lock covers each load-modify-save sequence so concurrent
    changes to different documents cannot overwrite each other.
    """

    def __init__(self, path: Path, storage: BlobStorage | None = None) -> None:
        """Initialize the store.

        Args:
            path: Location of the JSON file. It and its parent directory
                  are created on the first save.
            storage: Blob storage to read and write through (defaults to
                     the local filesystem)
        """
        self._path = path
        self._storage = storage if storage is not None else LocalStorage()
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> StoreSnapshot:
        """Read the full persisted mapping.

        Returns:
            The stored snapshot, or an empty one if the store does not exist yet

        Raises:
            StorageUnavailable: If the store cannot be read
            DeserializationError: If the store is not a valid timestamp mapping
        """
        with self._lock:
            try:
                raw = self._storage.read_file(self._path)
            except OSError as e:
                raise StorageUnavailable(str(self._path), f"Cannot read timestamp store ({e})") from e

        if raw is None:
            return StoreSnapshot()

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DeserializationError(str(self._path), "Timestamp store is not valid UTF-8") from e

        return StoreSnapshot.from_json(text, source=str(self._path))

    def save(self, snapshot: StoreSnapshot) -> None:
        """Write the full mapping, creating the containing directory if needed.

        Raises:
            StorageUnavailable: If the store cannot be written
        """
        data = snapshot.to_json().encode("utf-8")
        with self._lock:
            try:
                self._storage.ensure_directory(self._path.parent)
                self._storage.write_file(self._path, data)
            except OSError as e:
                raise StorageUnavailable(str(self._path), f"Cannot write timestamp store ({e})") from e

        logger.debug("Saved timestamp store: path=%s documents=%d", self._path, len(snapshot.documents))

    def get_entries(self, document_id: str) -> EntryMap:
        """Return a document's entry map, empty if it has no history."""
        return self.load().entries_for(document_id)

    def record_change(
        self,
        document_id: str,
        old_content: Sequence[str],
        new_content: Sequence[str],
        now: datetime | None = None,
    ) -> StoreSnapshot:
        """Diff two revisions of a document and persist the remapped timestamps.

        Lines merely shifted by edits elsewhere keep their timestamp; only
        inserted or replaced lines are stamped with now.

        Args:
            document_id: Document identifier
            old_content: Lines the existing entry map was recorded against
            new_content: Current lines
            now: Time of the change (defaults to the current UTC time)

        Returns:
            The updated snapshot, already persisted

        Raises:
            StorageUnavailable: If the store cannot be read or written
            MalformedEditScript: If the diff does not cover both contents;
                the persisted store is left untouched
        """
        if now is None:
            now = datetime.now(UTC)
        timestamp = format_timestamp(now)

        script = compute_edit_script(old_content, new_content)

        with self._lock:
            snapshot = self.load()
            previous = snapshot.entries_for(document_id)

            try:
                entries = remap_entries(previous, script, len(old_content), len(new_content), timestamp)
            except MalformedEditScript:
                logger.exception("Malformed edit script: document=%s", document_id)
                raise

            if document_id in snapshot.documents and entries == previous:
                logger.debug("No timestamp changes: document=%s", document_id)
                return snapshot

            snapshot.set_entries(document_id, entries)
            self.save(snapshot)

        stamped, dropped = count_changed_lines(script)
        logger.info(
            "Recorded change: document=%s stamped=%d dropped=%d lines=%d",
            document_id,
            stamped,
            dropped,
            len(new_content),
        )
        return snapshot
