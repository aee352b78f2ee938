from __future__ import annotations

import csv
import logging
from datetime import date
from typing import Iterable, Optional

from pydantic import ValidationError

from talent_directory.schemas import ImportReport, ImportRowError, ProfileCreate, ProfileSkill
from talent_directory.services.interchange import parse_profile_row, profiles_to_csv, read_csv_rows
from talent_directory.services.persistence import PersistenceError
from talent_directory.services.record_store import RecordStore

logger = logging.getLogger(__name__)


def describe_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        parts.append(f"{location}: {item.get('msg')}" if location else str(item.get("msg")))
    return "; ".join(parts)


async def _link_skills(store: RecordStore, data: ProfileCreate) -> ProfileCreate:
    """Point each imported skill at the taxonomy, adding missing entries."""
    linked = []
    for skill in data.skills:
        canonical = await store.add_skill({"name": skill.name, "category": skill.category})
        linked.append(ProfileSkill.from_skill(canonical, skill.proficiency))
    return data.model_copy(update={"skills": linked})


async def import_profiles_csv(store: RecordStore, text: str, link_skills: bool = True) -> ImportReport:
    """Add one profile per CSV row.

    A bad row is recorded in the report and the remaining rows still load.
    Ids in the file are ignored; every imported profile gets a fresh id.
    Skills are linked before the profile is saved, so a row whose profile
    save fails still leaves its skills in the taxonomy.
    """
    report = ImportReport()
    try:
        rows = read_csv_rows(text)
    except csv.Error as e:
        report.failed = 1
        report.errors.append(ImportRowError(row=0, error=f"Unreadable CSV: {e}"))
        return report

    for number, row in enumerate(rows, start=1):
        report.total += 1
        try:
            data = parse_profile_row(row)
            data.pop("id", None)
            create = ProfileCreate.model_validate(data)
            if link_skills:
                create = await _link_skills(store, create)
            profile = await store.add_profile(create)
        except ValidationError as e:
            error = describe_validation_error(e)
        except (PersistenceError, ValueError) as e:
            error = str(e)
        else:
            report.imported += 1
            report.profile_ids.append(profile.id)
            continue

        logger.warning("Import row %d rejected: %s", number, error)
        report.failed += 1
        report.errors.append(ImportRowError(row=number, error=error))

    logger.info(
        "CSV import finished: %d imported, %d failed of %d rows",
        report.imported,
        report.failed,
        report.total,
    )
    return report


async def export_profiles_csv(store: RecordStore, ids: Optional[Iterable[str]] = None) -> str:
    profiles = await store.list_profiles()
    if ids is not None:
        wanted = {profile_id.strip() for profile_id in ids if profile_id and profile_id.strip()}
        profiles = [profile for profile in profiles if profile.id in wanted]
    return profiles_to_csv(profiles)


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"talent-profiles-{today.isoformat()}.csv"
