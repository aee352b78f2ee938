import asyncio
import os
import sys
from pathlib import Path

sys.path.append(os.getcwd())  # Ensure talent_directory package is importable

from talent_directory.services.persistence import PersistenceError
from talent_directory.services.bulk_transfer import import_profiles_csv
from talent_directory.services.record_store import open_record_store
from talent_directory.utils.logging_config import setup_logging


async def run_import(path: Path) -> int:
    store = await open_record_store()
    try:
        report = await import_profiles_csv(store, path.read_text(encoding="utf-8"))
    finally:
        await store.close()

    print(f"Imported {report.imported} of {report.total} rows from {path}.")
    for error in report.errors:
        print(f"  row {error.row}: {error.error}")
    return 1 if report.failed else 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python scripts/import_profiles.py PATH")
        sys.exit(2)

    setup_logging()
    try:
        sys.exit(asyncio.run(run_import(Path(sys.argv[1]))))
    except (OSError, PersistenceError) as e:
        print(f"Import failed: {e}")
        sys.exit(1)
