"""
Shared fixtures: record stores over throwaway JSON directories and SQLite
files, plus a builder for valid profile payloads.
"""

import pytest

from talent_directory.config import settings
from talent_directory.services.persistence import JsonFilePersistence
from talent_directory.services.record_store import RecordStore
from talent_directory.services.sql_persistence import SqlPersistence


@pytest.fixture(autouse=True)
def _no_log_file(monkeypatch):
    """Keep test runs from writing data/app.log in the working tree."""
    monkeypatch.setattr(settings, "log_file", None)


@pytest.fixture
def json_adapter(tmp_path):
    return JsonFilePersistence(tmp_path / "data")


@pytest.fixture
def sql_adapter(tmp_path):
    adapter = SqlPersistence(f"sqlite:///{tmp_path / 'talent.db'}")
    yield adapter
    adapter.close()


@pytest.fixture(params=["json", "sql"])
def adapter(request, tmp_path):
    """Each store test runs once per storage backend."""
    if request.param == "json":
        yield JsonFilePersistence(tmp_path / "data")
    else:
        sql = SqlPersistence(f"sqlite:///{tmp_path / 'talent.db'}")
        yield sql
        sql.close()


@pytest.fixture
def store(adapter):
    return RecordStore(adapter)


@pytest.fixture
def make_profile():
    def _make(**overrides):
        data = {
            "name": "Ada Lovelace",
            "title": "Principal Engineer",
            "department": "Engineering",
            "contact": {"email": "ada@example.com", "phone": "+44 20 7946 0000"},
            "skills": [{"name": "Python", "category": "Languages", "proficiency": "Expert"}],
            "tags": ["mentor"],
        }
        data.update(overrides)
        return data

    return _make
