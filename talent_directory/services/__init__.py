from talent_directory.services.persistence import (
    JsonFilePersistence,
    PersistenceAdapter,
    PersistenceError,
    create_persistence,
)
from talent_directory.services.record_store import RecordStore, build_record_store, open_record_store
from talent_directory.services.interchange import flatten_profile, parse_profile_row, profiles_to_csv
from talent_directory.services.bulk_transfer import export_filename, export_profiles_csv, import_profiles_csv

__all__ = [
    "JsonFilePersistence",
    "PersistenceAdapter",
    "PersistenceError",
    "create_persistence",
    "RecordStore",
    "build_record_store",
    "open_record_store",
    "flatten_profile",
    "parse_profile_row",
    "profiles_to_csv",
    "export_filename",
    "export_profiles_csv",
    "import_profiles_csv",
]
