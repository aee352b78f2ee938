from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Union

from talent_directory.schemas import Profile, Skill

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Durable storage could not be read or written.

    Raised from store mutations; the in-memory record set is left as it was
    before the call.
    """


class PersistenceAdapter:
    """Loads and saves whole record sets. Every save replaces the set.

    Backends implement the six load/save methods; close() is optional.
    """

    def load_profiles(self) -> list[Profile]:
        raise NotImplementedError(f"{type(self).__name__} must implement load_profiles()")

    def save_profiles(self, profiles: list[Profile]) -> None:
        raise NotImplementedError(f"{type(self).__name__} must implement save_profiles()")

    def load_skills(self) -> list[Skill]:
        raise NotImplementedError(f"{type(self).__name__} must implement load_skills()")

    def save_skills(self, skills: list[Skill]) -> None:
        raise NotImplementedError(f"{type(self).__name__} must implement save_skills()")

    def load_categories(self) -> list[str]:
        raise NotImplementedError(f"{type(self).__name__} must implement load_categories()")

    def save_categories(self, categories: list[str]) -> None:
        raise NotImplementedError(f"{type(self).__name__} must implement save_categories()")

    def close(self) -> None:
        pass


def dump_record(record) -> dict:
    return record.model_dump(mode="json", by_alias=True, exclude_none=True)


def _validate_all(model, items: list, source) -> list:
    try:
        return [model.model_validate(item) for item in items]
    except ValueError as e:
        raise PersistenceError(f"Invalid record in {source}: {e}") from e


class JsonFilePersistence(PersistenceAdapter):
    """Three JSON documents under one directory.

    profiles.json   {"profiles": [...]}
    skills.json     {"skills": [...]}
    categories.json {"categories": [...]}
    """

    PROFILES_FILE = "profiles.json"
    SKILLS_FILE = "skills.json"
    CATEGORIES_FILE = "categories.json"

    def __init__(self, data_dir: Union[str, Path]):
        self.data_dir = Path(data_dir)

    def load_profiles(self) -> list[Profile]:
        data = self._read(self.PROFILES_FILE, "profiles")
        return _validate_all(Profile, data, self.data_dir / self.PROFILES_FILE)

    def save_profiles(self, profiles: list[Profile]) -> None:
        self._write(self.PROFILES_FILE, {"profiles": [dump_record(p) for p in profiles]})

    def load_skills(self) -> list[Skill]:
        data = self._read(self.SKILLS_FILE, "skills")
        return _validate_all(Skill, data, self.data_dir / self.SKILLS_FILE)

    def save_skills(self, skills: list[Skill]) -> None:
        self._write(self.SKILLS_FILE, {"skills": [dump_record(s) for s in skills]})

    def load_categories(self) -> list[str]:
        return [str(name) for name in self._read(self.CATEGORIES_FILE, "categories")]

    def save_categories(self, categories: list[str]) -> None:
        self._write(self.CATEGORIES_FILE, {"categories": list(categories)})

    def _read(self, filename: str, key: str) -> list[Any]:
        path = self.data_dir / filename
        if not path.exists():
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e
        if not isinstance(document, dict) or not isinstance(document.get(key, []), list):
            raise PersistenceError(f"Unexpected layout in {path}: expected an object with a '{key}' list")
        return document.get(key, [])

    def _write(self, filename: str, document: dict) -> None:
        path = self.data_dir / filename
        tmp_name = None
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            # Write next to the target and swap, so readers never see half a file.
            fd, tmp_name = tempfile.mkstemp(prefix=f".{filename}.", dir=self.data_dir)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise PersistenceError(f"Failed to write {path}: {e}") from e
        finally:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
        logger.debug("Wrote %s", path)


def create_persistence(backend: str, data_dir: str = None, database_url: str = None) -> PersistenceAdapter:
    """Build the adapter named by settings.storage_backend."""
    backend = (backend or "json").lower()
    if backend == "json":
        return JsonFilePersistence(data_dir or "data")
    if backend in ("sql", "sqlite", "database"):
        from talent_directory.services.sql_persistence import SqlPersistence

        return SqlPersistence(database_url)
    raise ValueError(f"Unknown storage backend: {backend}")
