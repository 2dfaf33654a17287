"""Watcher daemon main loop for recording document changes."""

import signal
import time
from dataclasses import dataclass, field
from pathlib import Path
from types import FrameType

from line_timestamps.config import Config
from line_timestamps.content import FileContentProvider
from line_timestamps.engine import TimestampEngine
from line_timestamps.logging import get_logger, setup_logging
from line_timestamps.store import TimestampStore
from line_timestamps.watcher.changes import FileFingerprint, needs_update
from line_timestamps.watcher.sources import discover_documents

logger = get_logger("watcher")

# Global flag for graceful shutdown
_shutdown_requested = False


def request_shutdown() -> None:
    """Request graceful shutdown of the watcher daemon."""
    global _shutdown_requested
    _shutdown_requested = True


def is_shutdown_requested() -> bool:
    """Check if shutdown has been requested."""
    return _shutdown_requested


def reset_shutdown() -> None:
    """Reset shutdown flag (useful for testing)."""
    global _shutdown_requested
    _shutdown_requested = False


def signal_handler(signum: int, frame: FrameType | None) -> None:
    """Handle shutdown signals gracefully."""
    sig_name = signal.Signals(signum).name
    logger.info("Received signal %s, shutting down", sig_name)
    request_shutdown()


@dataclass
class WatchState:
    """What the watcher has seen so far, keyed by document identifier."""

    fingerprints: dict[str, FileFingerprint] = field(default_factory=dict)
    initialized: bool = False


def create_engine(config: Config, provider: FileContentProvider | None = None) -> TimestampEngine:
    """Build a timestamp engine for the configured vault."""
    store = TimestampStore(config.store_path)
    if provider is None:
        provider = FileContentProvider(config.vault_path)
    return TimestampEngine(store, provider, cold_start=config.cold_start)


def sync_document(
    engine: TimestampEngine,
    provider: FileContentProvider,
    path: Path,
    state: WatchState,
) -> bool:
    """Notify the engine about a document if it changed.

    In the first cycle every document is only seeded, so existing
    timestamps are not disturbed by a restart. Documents that appear
    later are diffed against empty content.

    Args:
        engine: Timestamp engine
        provider: Content provider the engine reads from
        path: Path to the document
        state: Watcher state (updated in place)

    Returns:
        True if a change was recorded, False if up-to-date or only seeded
    """
    document_id = provider.document_id_for(path)
    previous = state.fingerprints.get(document_id)

    changed, reason, current = needs_update(path, previous)

    if current is None:
        return False

    if not changed:
        state.fingerprints[document_id] = current
        return False

    if reason == "new_file":
        if not state.initialized:
            engine.open_document(document_id)
            state.fingerprints[document_id] = current
            logger.debug("Seeded document: document=%s", document_id)
            return False
        engine.open_document(document_id, content=[])

    engine.on_content_changed(document_id)

    # Only advance after the change is persisted, so failures are retried
    state.fingerprints[document_id] = current

    logger.info("Recorded document change: document=%s reason=%s", document_id, reason)
    return True


def run_watch_cycle(
    engine: TimestampEngine,
    provider: FileContentProvider,
    patterns: list[str],
    state: WatchState,
    exclude: list[Path] | None = None,
) -> int:
    """Run one watch cycle.

    Args:
        engine: Timestamp engine
        provider: Content provider rooted at the vault
        patterns: Glob patterns selecting documents
        state: Watcher state carried between cycles
        exclude: Directories never to track

    Returns:
        Number of documents with recorded changes
    """
    paths = discover_documents(provider.root, patterns, exclude)

    recorded = 0
    seen: set[str] = set()
    for path in paths:
        if is_shutdown_requested():
            return recorded

        document_id = provider.document_id_for(path)
        seen.add(document_id)

        try:
            if sync_document(engine, provider, path, state):
                recorded += 1
        except Exception:
            logger.exception("Error recording change: document=%s", document_id)

    for document_id in sorted(set(state.fingerprints) - seen):
        del state.fingerprints[document_id]
        engine.close_document(document_id)
        logger.info("Document removed: document=%s", document_id)

    state.initialized = True
    return recorded


def run_watcher(config: Config) -> None:
    """Run the watcher daemon main loop.

    Discovers documents under the vault, records changed lines, and
    repeats on the configured interval until shutdown is requested.

    Args:
        config: Application configuration

    Raises:
        StorageUnavailable: If the timestamp store cannot be read at startup
    """
    reset_shutdown()

    setup_logging("watcher", log_dir=config.log_dir)

    provider = FileContentProvider(config.vault_path)
    engine = create_engine(config, provider)
    interval = config.watcher.interval_seconds
    patterns = config.watcher.patterns
    exclude = [config.store_path.parent]

    # Fail fast on an unreadable or corrupt store
    engine.store.load()

    logger.info(
        "Starting watcher daemon: vault=%s store=%s patterns=%s interval=%ss cold_start=%s",
        config.vault_path,
        config.store_path,
        ",".join(patterns),
        interval,
        config.cold_start,
    )

    state = WatchState()
    while not is_shutdown_requested():
        recorded = run_watch_cycle(engine, provider, patterns, state, exclude)

        if recorded > 0:
            logger.info("Cycle complete: documents_changed=%d", recorded)
        else:
            logger.debug("Cycle complete: no changes detected")

        if is_shutdown_requested():
            break

        # Sleep in small increments to allow graceful shutdown
        sleep_remaining = interval
        while sleep_remaining > 0 and not is_shutdown_requested():
            sleep_time = min(1.0, sleep_remaining)
            time.sleep(sleep_time)
            sleep_remaining -= sleep_time

    logger.info("Watcher daemon stopped")
