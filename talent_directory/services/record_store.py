"""In-memory record store over a persistence adapter.

The store owns three record sets: profiles, skills and categories. Every
mutation runs under one lock, stages a new copy of the affected set, writes
it through the adapter and only then swaps it into memory, so a failed write
leaves memory as it was.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Callable, Optional, Union

from talent_directory.config import Settings, settings as default_settings
from talent_directory.schemas import (
    UNCATEGORIZED,
    Profile,
    ProfileCreate,
    ProfilePatch,
    Skill,
    SkillCreate,
    SkillPatch,
)
from talent_directory.schemas.skill import has_reserved_delimiter
from talent_directory.services.persistence import (
    PersistenceAdapter,
    PersistenceError,
    create_persistence,
)

logger = logging.getLogger(__name__)


def generate_id() -> str:
    return str(uuid.uuid4())


def _profile_matches(profile: Profile, term: str) -> bool:
    if (
        term in profile.name.lower()
        or term in profile.department.lower()
        or term in profile.title.lower()
    ):
        return True
    return any(
        term in skill.name.lower() or term in skill.category.lower()
        for skill in profile.skills
    )


class RecordStore:
    def __init__(self, adapter: PersistenceAdapter):
        self.adapter = adapter
        self._profiles: list[Profile] = []
        self._skills: list[Skill] = []
        self._categories: list[str] = []
        self._ready: Optional[asyncio.Future] = None
        self._write_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def initialized(self) -> bool:
        ready = self._ready
        return ready is not None and ready.done() and not ready.cancelled() and ready.exception() is None

    async def initialize(self) -> "RecordStore":
        """Load all record sets once. Concurrent callers share one load."""
        if self._ready is None:
            self._ready = asyncio.ensure_future(self._load())
        ready = self._ready
        try:
            await asyncio.shield(ready)
        except Exception:
            # Do not cache the failure; the next caller retries the load.
            if self._ready is ready:
                self._ready = None
            raise
        return self

    async def _load(self) -> None:
        profiles, skills, categories = await asyncio.gather(
            self._run_io(self.adapter.load_profiles),
            self._run_io(self.adapter.load_skills),
            self._run_io(self.adapter.load_categories),
        )

        reconciled = list(dict.fromkeys(categories))
        if UNCATEGORIZED not in reconciled:
            reconciled.insert(0, UNCATEGORIZED)
        for skill in skills:
            if skill.category not in reconciled:
                reconciled.append(skill.category)
        if reconciled != categories:
            await self._run_io(self.adapter.save_categories, reconciled)

        self._profiles = profiles
        self._skills = skills
        self._categories = reconciled
        logger.info(
            "Record store loaded: %d profiles, %d skills, %d categories",
            len(profiles),
            len(skills),
            len(reconciled) - 1,
        )

    async def close(self) -> None:
        await self._run_io(self.adapter.close)

    async def _run_io(self, func: Callable, *args) -> Any:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, func, *args)
        except PersistenceError:
            raise
        except (OSError, ValueError) as e:
            raise PersistenceError(str(e)) from e

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    async def list_profiles(self) -> list[Profile]:
        await self.initialize()
        return [p.model_copy(deep=True) for p in self._profiles]

    async def get_profile(self, profile_id: str) -> Optional[Profile]:
        await self.initialize()
        for profile in self._profiles:
            if profile.id == profile_id:
                return profile.model_copy(deep=True)
        return None

    async def add_profile(self, data: Union[ProfileCreate, dict]) -> Profile:
        await self.initialize()
        if not isinstance(data, ProfileCreate):
            data = ProfileCreate.model_validate(data)
        payload = data.model_dump()
        payload["id"] = generate_id()
        profile = Profile.model_validate(payload)

        async with self._write_lock:
            staged = self._profiles + [profile]
            await self._run_io(self.adapter.save_profiles, staged)
            self._profiles = staged
        logger.info("Added profile %s (%s)", profile.id, profile.name)
        return profile.model_copy(deep=True)

    async def update_profile(self, profile_id: str, patch: Union[ProfilePatch, dict]) -> Optional[Profile]:
        await self.initialize()
        if not isinstance(patch, ProfilePatch):
            patch = ProfilePatch.model_validate(patch)
        changes = patch.model_dump(exclude_unset=True)
        changes.pop("id", None)

        async with self._write_lock:
            index = self._index_of(self._profiles, profile_id)
            if index is None:
                return None
            merged = {**self._profiles[index].model_dump(), **changes, "id": profile_id}
            profile = Profile.model_validate(merged)
            staged = list(self._profiles)
            staged[index] = profile
            await self._run_io(self.adapter.save_profiles, staged)
            self._profiles = staged
        logger.info("Updated profile %s: %s", profile_id, sorted(changes))
        return profile.model_copy(deep=True)

    async def delete_profile(self, profile_id: str) -> bool:
        await self.initialize()
        async with self._write_lock:
            staged = [p for p in self._profiles if p.id != profile_id]
            if len(staged) == len(self._profiles):
                return False
            await self._run_io(self.adapter.save_profiles, staged)
            self._profiles = staged
        logger.info("Deleted profile %s", profile_id)
        return True

    async def clear_profiles(self) -> None:
        await self.initialize()
        async with self._write_lock:
            await self._run_io(self.adapter.save_profiles, [])
            self._profiles = []

    async def search_profiles(self, query: str) -> list[Profile]:
        await self.initialize()
        term = (query or "").lower()
        return [p.model_copy(deep=True) for p in self._profiles if _profile_matches(p, term)]

    # ------------------------------------------------------------------
    # Skills
    # ------------------------------------------------------------------

    async def list_skills(self) -> list[Skill]:
        await self.initialize()
        return [s.model_copy() for s in self._skills]

    async def get_skill(self, skill_id: str) -> Optional[Skill]:
        await self.initialize()
        for skill in self._skills:
            if skill.id == skill_id:
                return skill.model_copy()
        return None

    async def add_skill(self, data: Union[SkillCreate, dict]) -> Skill:
        """Create a skill, or return the existing one with the same name."""
        await self.initialize()
        if not isinstance(data, SkillCreate):
            data = SkillCreate.model_validate(data)

        async with self._write_lock:
            existing = self._skill_named(data.name)
            if existing is not None:
                logger.info("Skill %r already exists as %s", data.name, existing.id)
                return existing.model_copy()
            skill = Skill(id=generate_id(), name=data.name, category=data.category)
            staged = self._skills + [skill]
            await self._commit_skills(staged)
        logger.info("Added skill %s (%s / %s)", skill.id, skill.name, skill.category)
        return skill.model_copy()

    async def update_skill(self, skill_id: str, patch: Union[SkillPatch, dict]) -> Optional[Skill]:
        """Merge a patch into a skill.

        Returns None when the skill is unknown or the new name belongs to
        another skill. Profiles that embedded the old values keep them.
        """
        await self.initialize()
        if not isinstance(patch, SkillPatch):
            patch = SkillPatch.model_validate(patch)
        changes = patch.model_dump(exclude_unset=True)

        async with self._write_lock:
            index = self._index_of(self._skills, skill_id)
            if index is None:
                return None
            skill = Skill.model_validate({**self._skills[index].model_dump(), **changes, "id": skill_id})
            other = self._skill_named(skill.name)
            if other is not None and other.id != skill_id:
                logger.warning("Rename of skill %s rejected: %r is taken", skill_id, skill.name)
                return None
            staged = list(self._skills)
            staged[index] = skill
            await self._commit_skills(staged)
        return skill.model_copy()

    async def delete_skill(self, skill_id: str) -> bool:
        await self.initialize()
        async with self._write_lock:
            staged = [s for s in self._skills if s.id != skill_id]
            if len(staged) == len(self._skills):
                return False
            await self._run_io(self.adapter.save_skills, staged)
            self._skills = staged
        logger.info("Deleted skill %s", skill_id)
        return True

    async def clear_skills(self) -> None:
        await self.initialize()
        async with self._write_lock:
            await self._run_io(self.adapter.save_skills, [])
            self._skills = []

    async def _commit_skills(self, staged: list[Skill]) -> None:
        """Persist skills plus any category they introduce. Caller holds the lock."""
        categories = list(self._categories)
        for skill in staged:
            if skill.category not in categories:
                categories.append(skill.category)
        if categories != self._categories:
            await self._save_taxonomy(staged, categories)
            return
        await self._run_io(self.adapter.save_skills, staged)
        self._skills = staged

    def _skill_named(self, name: str) -> Optional[Skill]:
        for skill in self._skills:
            if skill.name == name:
                return skill
        return None

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def list_categories(self) -> list[str]:
        await self.initialize()
        return [c for c in self._categories if c != UNCATEGORIZED]

    async def add_category(self, name: str) -> bool:
        await self.initialize()
        name = (name or "").strip()
        if not name or name == UNCATEGORIZED or has_reserved_delimiter(name):
            return False
        async with self._write_lock:
            if name in self._categories:
                return False
            staged = self._categories + [name]
            await self._run_io(self.adapter.save_categories, staged)
            self._categories = staged
        logger.info("Added category %r", name)
        return True

    async def delete_category(self, name: str) -> bool:
        """Remove a category; its skills move to Uncategorized."""
        await self.initialize()
        if name == UNCATEGORIZED:
            return False
        async with self._write_lock:
            if name not in self._categories:
                return False
            staged_skills = [
                s.model_copy(update={"category": UNCATEGORIZED}) if s.category == name else s
                for s in self._skills
            ]
            staged_categories = [c for c in self._categories if c != name]
            await self._save_taxonomy(staged_skills, staged_categories)
        logger.info("Deleted category %r", name)
        return True

    async def update_category(self, old_name: str, new_name: str) -> bool:
        """Rename a category on every skill that carries it."""
        await self.initialize()
        new_name = (new_name or "").strip()
        if old_name == UNCATEGORIZED or not new_name or has_reserved_delimiter(new_name):
            return False
        async with self._write_lock:
            if old_name not in self._categories:
                return False
            if new_name == old_name:
                return True
            if new_name in self._categories:
                return False
            staged_skills = [
                s.model_copy(update={"category": new_name}) if s.category == old_name else s
                for s in self._skills
            ]
            staged_categories = [new_name if c == old_name else c for c in self._categories]
            await self._save_taxonomy(staged_skills, staged_categories)
        logger.info("Renamed category %r to %r", old_name, new_name)
        return True

    async def _save_taxonomy(self, skills: list[Skill], categories: list[str]) -> None:
        # Skills first. A crash in between leaves at worst a stale category
        # name or a skill category missing from the set, which _load re-registers.
        await self._run_io(self.adapter.save_skills, skills)
        try:
            await self._run_io(self.adapter.save_categories, categories)
        except PersistenceError:
            logger.error("Categories not saved after skills were rewritten; restoring skills file")
            await self._run_io(self.adapter.save_skills, self._skills)
            raise
        self._skills = skills
        self._categories = categories

    @staticmethod
    def _index_of(records: list, record_id: str) -> Optional[int]:
        for index, record in enumerate(records):
            if record.id == record_id:
                return index
        return None


def build_record_store(config: Settings = None) -> RecordStore:
    config = config or default_settings
    adapter = create_persistence(
        config.storage_backend,
        data_dir=config.data_dir,
        database_url=config.database_url,
    )
    return RecordStore(adapter)


async def open_record_store(config: Settings = None) -> RecordStore:
    """Build the store for the configured backend and load it."""
    store = build_record_store(config)
    return await store.initialize()
