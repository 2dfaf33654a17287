"""Document content providers."""

from pathlib import Path
from typing import Protocol


def split_lines(text: str) -> list[str]:
    """Split text into editor lines.

    Splits on newline only, so a trailing newline yields a final empty
    line and an empty document is a single empty line.
    """
    return text.split("\n")


class ContentProvider(Protocol):
    """Source of a document's current full content."""

    def get_full_content(self, document_id: str) -> list[str]:
        """Return the document's lines.

        Raises:
            FileNotFoundError: If the document does not exist
        """
        ...


class FileContentProvider:
    """Reads documents from files under a root directory.

    Document identifiers are POSIX-style paths relative to the root.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, document_id: str) -> Path:
        return self._root / document_id

    def document_id_for(self, path: Path) -> str:
        """Map a file under the root to its document identifier.

        Raises:
            ValueError: If path is not under the root
        """
        return path.relative_to(self._root).as_posix()

    def get_full_content(self, document_id: str) -> list[str]:
        text = self.path_for(document_id).read_text(encoding="utf-8")
        return split_lines(text)
