from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from talent_directory.database import init_db, make_engine, make_session_factory
from talent_directory.models import (
    AvailabilityRow,
    ContactInfoRow,
    ProfileRow,
    ProfileSkillRow,
    SkillCategoryRow,
    SkillRow,
)
from talent_directory.schemas import Profile, Skill
from talent_directory.services.persistence import PersistenceAdapter, PersistenceError, dump_record

logger = logging.getLogger(__name__)


def _dump_optional(record) -> Optional[dict]:
    return dump_record(record) if record is not None else None


def profile_to_row(profile: Profile, position: int = 0) -> ProfileRow:
    row = ProfileRow(
        id=profile.id,
        position=position,
        name=profile.name,
        title=profile.title,
        department=profile.department,
        image=profile.image,
        bio=profile.bio,
        location=profile.location,
        years_of_experience=profile.years_of_experience,
        hourly_rate=profile.hourly_rate,
        day_rate=profile.day_rate,
        yearly_salary=profile.yearly_salary,
        project_rates=_dump_optional(profile.project_rates),
        tags=list(profile.tags),
        education=[dump_record(e) for e in profile.education],
        certifications=[dump_record(c) for c in profile.certifications],
        extra=dict(profile.model_extra) if profile.model_extra else None,
    )
    contact = profile.contact
    row.contact = ContactInfoRow(
        email=contact.email,
        phone=contact.phone,
        website=contact.website,
        location=contact.location,
        social=_dump_optional(contact.social),
    )
    availability = profile.availability
    row.availability = AvailabilityRow(
        status=availability.status,
        available_from=availability.available_from,
        next_available=availability.next_available,
        preferred_hours=availability.preferred_hours,
        timezone=availability.timezone,
        booking_lead_time=availability.booking_lead_time,
        capacity=_dump_optional(availability.capacity),
    )
    row.skills = [
        ProfileSkillRow(
            position=index,
            skill_id=skill.id,
            name=skill.name,
            category=skill.category,
            proficiency=skill.proficiency,
        )
        for index, skill in enumerate(profile.skills)
    ]
    return row


def row_to_profile(row: ProfileRow) -> Profile:
    payload = dict(row.extra or {})
    payload.update(
        {
            "id": row.id,
            "name": row.name,
            "title": row.title,
            "department": row.department,
            "image": row.image,
            "bio": row.bio,
            "location": row.location,
            "years_of_experience": row.years_of_experience,
            "hourly_rate": row.hourly_rate,
            "day_rate": row.day_rate,
            "yearly_salary": row.yearly_salary,
            "project_rates": row.project_rates,
            "tags": row.tags or [],
            "education": row.education or [],
            "certifications": row.certifications or [],
            "skills": [
                {
                    "id": skill.skill_id,
                    "name": skill.name,
                    "category": skill.category,
                    "proficiency": skill.proficiency,
                }
                for skill in row.skills
            ],
        }
    )
    if row.contact is not None:
        payload["contact"] = {
            "email": row.contact.email,
            "phone": row.contact.phone,
            "website": row.contact.website,
            "location": row.contact.location,
            "social": row.contact.social,
        }
    if row.availability is not None:
        payload["availability"] = {
            "status": row.availability.status,
            "available_from": row.availability.available_from,
            "next_available": row.availability.next_available,
            "preferred_hours": row.availability.preferred_hours,
            "timezone": row.availability.timezone,
            "booking_lead_time": row.availability.booking_lead_time,
            "capacity": row.availability.capacity,
        }
    return Profile.model_validate(payload)


class SqlPersistence(PersistenceAdapter):
    """Normalized tables behind the same read-all / write-all contract."""

    def __init__(self, database_url: str = None, engine=None):
        self.engine = engine if engine is not None else make_engine(database_url)
        self.SessionLocal = make_session_factory(self.engine)
        try:
            init_db(self.engine)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not initialize database: {e}") from e

    @contextmanager
    def _session(self):
        db: Session = self.SessionLocal()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceError(f"Database error: {e}") from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def load_profiles(self) -> list[Profile]:
        with self._session() as db:
            rows = db.query(ProfileRow).order_by(ProfileRow.position).all()
            try:
                return [row_to_profile(row) for row in rows]
            except ValueError as e:
                raise PersistenceError(f"Invalid profile row: {e}") from e

    def save_profiles(self, profiles: list[Profile]) -> None:
        with self._session() as db:
            # Child rows go with their profile through ON DELETE CASCADE.
            for row in db.query(ProfileRow).all():
                db.delete(row)
            db.flush()
            db.add_all(profile_to_row(profile, index) for index, profile in enumerate(profiles))
        logger.debug("Saved %d profiles", len(profiles))

    def load_skills(self) -> list[Skill]:
        with self._session() as db:
            rows = db.query(SkillRow).order_by(SkillRow.position).all()
            return [Skill(id=row.id, name=row.name, category=row.category) for row in rows]

    def save_skills(self, skills: list[Skill]) -> None:
        with self._session() as db:
            db.query(SkillRow).delete(synchronize_session=False)
            db.add_all(
                SkillRow(id=skill.id, position=index, name=skill.name, category=skill.category)
                for index, skill in enumerate(skills)
            )

    def load_categories(self) -> list[str]:
        with self._session() as db:
            rows = db.query(SkillCategoryRow).order_by(SkillCategoryRow.position).all()
            return [row.name for row in rows]

    def save_categories(self, categories: list[str]) -> None:
        with self._session() as db:
            db.query(SkillCategoryRow).delete(synchronize_session=False)
            db.add_all(
                SkillCategoryRow(name=name, position=index) for index, name in enumerate(categories)
            )

    def close(self) -> None:
        self.engine.dispose()
