"""Tests for document discovery."""

from pathlib import Path

from line_timestamps.watcher.sources import discover_documents


class TestDiscoverDocuments:
    """Tests for discover_documents function."""

    def test_returns_empty_list_when_root_missing(self, tmp_path: Path) -> None:
        """Should return empty list when the vault does not exist."""
        assert discover_documents(tmp_path / "missing", ["**/*.md"]) == []

    def test_discovers_matching_files(self, tmp_path: Path) -> None:
        """Should find files matching the patterns, including nested ones."""
        (tmp_path / "journal").mkdir()
        note = tmp_path / "note.md"
        entry = tmp_path / "journal" / "2024-01-01.md"
        other = tmp_path / "image.png"
        for path in (note, entry, other):
            path.touch()

        result = discover_documents(tmp_path, ["**/*.md"])

        assert result == sorted([note, entry])

    def test_skips_directories(self, tmp_path: Path) -> None:
        """Directories matching a pattern should be ignored."""
        (tmp_path / "folder.md").mkdir()
        assert discover_documents(tmp_path, ["**/*.md"]) == []

    def test_excludes_store_directory(self, tmp_path: Path) -> None:
        """Files under excluded directories should not be tracked."""
        store_dir = tmp_path / ".timestamps" / "plugin-data"
        store_dir.mkdir(parents=True)
        (store_dir / "notes.md").touch()
        note = tmp_path / "note.md"
        note.touch()

        result = discover_documents(tmp_path, ["**/*.md"], exclude=[store_dir])

        assert result == [note]

    def test_deduplicates_overlapping_patterns(self, tmp_path: Path) -> None:
        """A file matched by several patterns should appear once."""
        note = tmp_path / "note.md"
        note.touch()
        assert discover_documents(tmp_path, ["*.md", "**/*.md"]) == [note]

    def test_returns_sorted_paths(self, tmp_path: Path) -> None:
        """Should return paths in sorted order."""
        (tmp_path / "z.md").touch()
        (tmp_path / "a.md").touch()
        (tmp_path / "m.txt").touch()

        result = discover_documents(tmp_path, ["*.md", "*.txt"])

        assert [p.name for p in result] == ["a.md", "m.txt", "z.md"]
