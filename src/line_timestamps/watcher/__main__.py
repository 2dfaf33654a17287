"""CLI entry point for the watcher daemon.

Allows running the watcher as a module:
    python -m line_timestamps.watcher
"""

import signal
import sys

from line_timestamps.config import load_config
from line_timestamps.errors import StorageUnavailable
from line_timestamps.logging import get_logger
from line_timestamps.watcher.daemon import request_shutdown, run_watcher, signal_handler

logger = get_logger("watcher")


def main() -> None:
    """Main entry point for the watcher daemon."""
    # Set up signal handlers for graceful shutdown
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    config = load_config()

    try:
        run_watcher(config)
    except KeyboardInterrupt:
        # Handle case where signal handler didn't catch it
        logger.info("Interrupted, shutting down")
        request_shutdown()
    except StorageUnavailable as e:
        logger.error("Cannot start watcher: %s", e)
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
