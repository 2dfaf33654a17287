
import sys
from pathlib import Path

# Add src to path if running from repo root
repo_root = Path(__file__).parent.parent
if (repo_root / "src").exists():
    sys.path.insert(0, str(repo_root / "src"))

from line_timestamps.config import load_config
from line_timestamps.content import FileContentProvider
from line_timestamps.store import TimestampStore

def verify():
    config = load_config()
    store = TimestampStore(config.store_path)
    provider = FileContentProvider(config.vault_path)

    snapshot = store.load()
    print(f"Verifying {len(snapshot.documents)} documents in {config.store_path}...")

    problems = 0
    for document_id, entries in snapshot.documents.items():
        try:
            lines = provider.get_full_content(document_id)
        except FileNotFoundError:
            print(f" - {document_id}: document no longer exists ({len(entries)} entries)")
            problems += 1
            continue

        stale = [index for index in entries if index >= len(lines)]
        if stale:
            print(f" - {document_id}: {len(stale)} entries beyond line {len(lines) - 1} (first: {stale[0]})")
            problems += 1

    if problems:
        print(f"\nFound {problems} document(s) with stale entries.")
    else:
        print("\nAll entries point at existing lines.")
    return problems

if __name__ == "__main__":
    sys.exit(1 if verify() else 0)
