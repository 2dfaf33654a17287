"""Timestamp store data models."""

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from line_timestamps.errors import DeserializationError

# line index -> ISO-8601 timestamp
EntryMap = dict[int, str]


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as UTC ISO-8601 with milliseconds and a Z suffix.

    Naive datetimes are treated as UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse a stored ISO-8601 timestamp."""
    return datetime.fromisoformat(value)


@dataclass
class StoreSnapshot:
    """Full in-memory copy of the timestamp store.

    Maps document identifier to its entry map. Entry maps are kept
    ordered by line index so serialization is stable.
    """

    documents: dict[str, EntryMap] = field(default_factory=dict)

    def entries_for(self, document_id: str) -> EntryMap:
        """Return a copy of a document's entry map (empty if untracked)."""
        return dict(self.documents.get(document_id, {}))

    def set_entries(self, document_id: str, entries: EntryMap) -> None:
        """Replace a document's entry map in full."""
        self.documents[document_id] = {index: entries[index] for index in sorted(entries)}

    def copy(self) -> "StoreSnapshot":
        return StoreSnapshot({doc_id: dict(entries) for doc_id, entries in self.documents.items()})

    def to_dict(self) -> dict[str, dict[str, str]]:
        """Convert to the persisted shape (line indices as string keys)."""
        return {
            doc_id: {str(index): entries[index] for index in sorted(entries)}
            for doc_id, entries in self.documents.items()
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n"

    @classmethod
    def from_dict(cls, data: Any, source: str = "<memory>") -> "StoreSnapshot":
        """Build a snapshot from the persisted shape, validating it.

        Args:
            data: Decoded JSON value
            source: Location used in error messages

        Raises:
            DeserializationError: If data is not a mapping of document ids
                to mappings of non-negative integer keys to ISO-8601 strings
        """
        if not isinstance(data, dict):
            raise DeserializationError(source, f"Expected an object at top level, got {type(data).__name__}")

        documents: dict[str, EntryMap] = {}
        for doc_id, raw_entries in data.items():
            if not isinstance(raw_entries, dict):
                raise DeserializationError(source, f"Entries for {doc_id!r} are not an object")
            entries: EntryMap = {}
            for key, value in raw_entries.items():
                if not isinstance(key, str) or not (key.isascii() and key.isdigit()):
                    raise DeserializationError(source, f"Invalid line index {key!r} in {doc_id!r}")
                if not isinstance(value, str):
                    raise DeserializationError(source, f"Timestamp for line {key} in {doc_id!r} is not a string")
                try:
                    parse_timestamp(value)
                except ValueError:
                    raise DeserializationError(
                        source, f"Invalid timestamp {value!r} for line {key} in {doc_id!r}"
                    ) from None
                entries[int(key)] = value
            documents[doc_id] = {index: entries[index] for index in sorted(entries)}

        return cls(documents)

    @classmethod
    def from_json(cls, text: str, source: str = "<memory>") -> "StoreSnapshot":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DeserializationError(source, f"Timestamp store is not valid JSON ({e})") from e
        return cls.from_dict(data, source)
