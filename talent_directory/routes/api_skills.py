from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from talent_directory.dependencies import get_store
from talent_directory.schemas import (
    UNCATEGORIZED,
    CategoryRequest,
    DeleteResponse,
    Skill,
    SkillCreate,
    SkillPatch,
)
from talent_directory.services.bulk_transfer import describe_validation_error
from talent_directory.services.record_store import RecordStore

router = APIRouter()


# Category routes come first so "/categories" is not taken for a skill id.

@router.get("/categories", response_model=list[str])
async def list_categories(store: RecordStore = Depends(get_store)):
    return await store.list_categories()


@router.post("/categories", response_model=CategoryRequest, status_code=201)
async def create_category(data: CategoryRequest, store: RecordStore = Depends(get_store)):
    name = data.name.strip()
    if not await store.add_category(name):
        raise HTTPException(status_code=409, detail=f"Category {name!r} was rejected")
    return CategoryRequest(name=name)


@router.put("/categories/{name}", response_model=CategoryRequest)
async def rename_category(
    name: str,
    data: CategoryRequest,
    store: RecordStore = Depends(get_store),
):
    if name != UNCATEGORIZED and name not in await store.list_categories():
        raise HTTPException(status_code=404, detail="Category not found")
    if not await store.update_category(name, data.name):
        raise HTTPException(status_code=409, detail=f"Cannot rename {name!r} to {data.name!r}")
    return CategoryRequest(name=data.name.strip())


@router.delete("/categories/{name}", response_model=DeleteResponse)
async def delete_category(name: str, store: RecordStore = Depends(get_store)):
    if name == UNCATEGORIZED:
        raise HTTPException(status_code=409, detail=f"{UNCATEGORIZED} cannot be deleted")
    if not await store.delete_category(name):
        raise HTTPException(status_code=404, detail="Category not found")
    return DeleteResponse(deleted=True, id=name)


@router.get("", response_model=list[Skill])
async def list_skills(store: RecordStore = Depends(get_store)):
    return await store.list_skills()


@router.post("", response_model=Skill, status_code=201)
async def create_skill(data: SkillCreate, store: RecordStore = Depends(get_store)):
    """Create a skill. An existing skill with the same name is returned as-is."""
    return await store.add_skill(data)


@router.get("/{skill_id}", response_model=Skill)
async def get_skill(skill_id: str, store: RecordStore = Depends(get_store)):
    skill = await store.get_skill(skill_id)
    if not skill:
        raise HTTPException(status_code=404, detail="Skill not found")
    return skill


@router.patch("/{skill_id}", response_model=Skill)
async def update_skill(skill_id: str, patch: SkillPatch, store: RecordStore = Depends(get_store)):
    if not await store.get_skill(skill_id):
        raise HTTPException(status_code=404, detail="Skill not found")
    try:
        skill = await store.update_skill(skill_id, patch)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=describe_validation_error(e))
    if not skill:
        raise HTTPException(status_code=409, detail="Another skill already has that name")
    return skill


@router.delete("/{skill_id}", response_model=DeleteResponse)
async def delete_skill(skill_id: str, store: RecordStore = Depends(get_store)):
    if not await store.delete_skill(skill_id):
        raise HTTPException(status_code=404, detail="Skill not found")
    return DeleteResponse(deleted=True, id=skill_id)
