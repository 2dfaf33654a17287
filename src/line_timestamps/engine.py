"""Line timestamp tracking engine.

Keeps the last-known content of each open document, diffs it against
the current content on every change notification, and records the
remapped timestamps in the store.

Usage:
    store = TimestampStore(vault / ".timestamps/plugin-data/timestamps.json")
    engine = TimestampEngine(store, FileContentProvider(vault))

    # When a document is opened
    engine.open_document("notes/today.md")

    # On every settled content change reported by the host
    engine.on_content_changed("notes/today.md")

    # For a rendering layer
    stamps = engine.get_timestamps_for_document("notes/today.md")
"""

import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from line_timestamps.config import COLD_START_POLICIES
from line_timestamps.content import ContentProvider
from line_timestamps.logging import get_logger
from line_timestamps.models import EntryMap
from line_timestamps.store import TimestampStore

logger = get_logger("engine")


@dataclass
class DocumentState:
    """Per-document tracking state owned by the engine."""

    document_id: str
    # Content the stored entry map currently describes; None until seeded
    baseline: list[str] | None = None
    changes: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)


class TimestampEngine:
    """Tracks per-line edit timestamps for documents.

    Changes to the same document are serialized; changes to different
    documents only contend on the store's own lock. A closed document keeps
    its state entry, so calls racing a close still share one lock.
    """

    def __init__(
        self,
        store: TimestampStore,
        provider: ContentProvider,
        cold_start: str = "seed",
        baseline_provider: ContentProvider | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            store: Timestamp store to record changes in
            provider: Source of current document content
            cold_start: What to diff against when a change arrives for a
                        document that was never opened: 'seed' reads the
                        baseline from baseline_provider, 'reset' uses empty
                        content so every line is stamped. Without a
                        baseline_provider, 'seed' only applies through
                        open_document and unopened documents are reset.
            baseline_provider: Source of the last saved content, distinct
                               from provider, used by the 'seed' policy
        """
        if cold_start not in COLD_START_POLICIES:
            raise ValueError(f"Invalid cold_start policy: {cold_start!r} (expected one of {COLD_START_POLICIES})")

        self._store = store
        self._provider = provider
        self._baseline_provider = baseline_provider
        self._cold_start = cold_start
        self._states: dict[str, DocumentState] = {}
        self._states_lock = threading.Lock()

    @property
    def store(self) -> TimestampStore:
        return self._store

    def _state(self, document_id: str) -> DocumentState:
        with self._states_lock:
            state = self._states.get(document_id)
            if state is None:
                state = DocumentState(document_id)
                self._states[document_id] = state
            return state

    def is_tracking(self, document_id: str) -> bool:
        """Whether a baseline is cached for the document."""
        state = self._states.get(document_id)
        return state is not None and state.baseline is not None

    def open_document(self, document_id: str, content: Sequence[str] | None = None) -> None:
        """Seed a document's baseline without recording any change.

        Args:
            document_id: Document identifier
            content: Baseline lines. Defaults to the provider's current
                     content; pass [] for a document that did not exist before.
        """
        state = self._state(document_id)
        with state.lock:
            if content is None:
                content = self._provider.get_full_content(document_id)
            state.baseline = list(content)

        logger.debug("Opened document: document=%s lines=%d", document_id, len(state.baseline))

    def close_document(self, document_id: str) -> None:
        """Forget a document's cached baseline. Stored timestamps are kept.

        The state entry itself stays registered so later changes to the
        document still share its lock.
        """
        with self._states_lock:
            state = self._states.get(document_id)
        if state is None:
            return

        with state.lock:
            state.baseline = None
        logger.debug("Closed document: document=%s", document_id)

    def _cold_start_baseline(self, document_id: str) -> list[str]:
        if self._cold_start == "seed" and self._baseline_provider is not None:
            logger.info("No baseline, seeding from saved content: document=%s", document_id)
            return list(self._baseline_provider.get_full_content(document_id))

        if self._cold_start == "seed":
            # Current content already includes the edit, so it cannot serve as the baseline
            logger.warning("Document was not opened before changing, stamping every line: document=%s", document_id)
        else:
            logger.info("No baseline, stamping every line: document=%s", document_id)
        return []

    def on_content_changed(
        self,
        document_id: str,
        changed_line: int | None = None,
        now: datetime | None = None,
    ) -> EntryMap:
        """Record a settled content change for a document.

        The full current content is fetched and diffed against the
        baseline; changed_line is only a hint from the host and is not
        trusted, since edits shift every line after them.

        Args:
            document_id: Document identifier
            changed_line: Line the host reported as edited, if any
            now: Time of the change (defaults to the current UTC time)

        Returns:
            The document's updated entry map

        Raises:
            StorageUnavailable: If the store cannot be read or written. The
                baseline is not advanced, so the next call retries the diff.
            MalformedEditScript: If the diff pipeline produced an invalid script
            FileNotFoundError: If the provider cannot find the document
        """
        state = self._state(document_id)
        with state.lock:
            current = list(self._provider.get_full_content(document_id))

            if state.baseline is None:
                state.baseline = self._cold_start_baseline(document_id)

            if changed_line is not None:
                logger.debug("Change reported: document=%s line=%d", document_id, changed_line)

            snapshot = self._store.record_change(document_id, state.baseline, current, now)

            state.baseline = current
            state.changes += 1

        return snapshot.entries_for(document_id)

    def get_timestamps_for_document(self, document_id: str) -> EntryMap:
        """Return the document's line timestamps, empty if it has no history."""
        return self._store.get_entries(document_id)
