import asyncio
import os
import sys
from pathlib import Path

sys.path.append(os.getcwd())  # Ensure talent_directory package is importable

from talent_directory.services.persistence import PersistenceError
from talent_directory.services.bulk_transfer import export_filename, export_profiles_csv
from talent_directory.services.record_store import open_record_store
from talent_directory.utils.logging_config import setup_logging


async def run_export(path: Path) -> None:
    store = await open_record_store()
    try:
        content = await export_profiles_csv(store)
        count = len(await store.list_profiles())
    finally:
        await store.close()

    path.parent.mkdir(parents=True, exist_ok=True)
    # csv rows already end in \r\n; keep them as written.
    path.write_text(content, encoding="utf-8", newline="")
    print(f"Wrote {count} profiles to {path}.")


if __name__ == "__main__":
    target = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(export_filename())

    setup_logging()
    try:
        asyncio.run(run_export(target))
    except (OSError, PersistenceError) as e:
        print(f"Export failed: {e}")
        sys.exit(1)
