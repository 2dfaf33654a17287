"""Document discovery under the vault root."""

from pathlib import Path

from line_timestamps.logging import get_logger

logger = get_logger("sources")


def discover_documents(
    root: Path,
    patterns: list[str],
    exclude: list[Path] | None = None,
) -> list[Path]:
    """Discover trackable documents under root.

    Args:
        root: Vault root directory
        patterns: Glob patterns relative to root (e.g. '**/*.md')
        exclude: Directories whose contents are never tracked, such as
                 the timestamp store's own directory

    Returns:
        Sorted, de-duplicated list of file paths
    """
    if not root.exists():
        return []

    excluded = [path.resolve() for path in exclude or []]
    found: set[Path] = set()
    for pattern in patterns:
        for path in root.glob(pattern):
            if not path.is_file():
                continue
            resolved = path.resolve()
            if any(resolved.is_relative_to(directory) for directory in excluded):
                continue
            found.add(path)

    logger.debug("Discovered documents: root=%s count=%d", root, len(found))
    return sorted(found)
