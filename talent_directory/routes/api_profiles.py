from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from talent_directory.dependencies import get_store
from talent_directory.schemas import DeleteResponse, Profile, ProfileCreate, ProfilePatch
from talent_directory.services.bulk_transfer import (
    describe_validation_error,
    export_filename,
    export_profiles_csv,
)
from talent_directory.services.persistence import dump_record
from talent_directory.services.record_store import RecordStore

router = APIRouter()


def _split_ids(ids: Optional[str]) -> Optional[list[str]]:
    if not ids:
        return None
    return [part.strip() for part in ids.split(",") if part.strip()]


@router.get("", response_model=list[Profile])
async def list_profiles(
    q: Optional[str] = None,
    store: RecordStore = Depends(get_store),
):
    if q:
        return await store.search_profiles(q)
    return await store.list_profiles()


@router.post("", response_model=Profile, status_code=201)
async def create_profile(data: ProfileCreate, store: RecordStore = Depends(get_store)):
    return await store.add_profile(data)


@router.get("/export")
async def export_profiles(
    ids: Optional[str] = None,
    format: str = Query("csv", pattern="^(csv|json)$"),
    store: RecordStore = Depends(get_store),
):
    """Download profiles as CSV (default) or JSON, optionally limited to ids."""
    wanted = _split_ids(ids)
    filename = export_filename()
    if format == "json":
        profiles = await store.list_profiles()
        if wanted is not None:
            profiles = [p for p in profiles if p.id in wanted]
        return JSONResponse(
            content=[dump_record(p) for p in profiles],
            headers={"Content-Disposition": f'attachment; filename="{filename[:-4]}.json"'},
        )

    content = await export_profiles_csv(store, wanted)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{profile_id}", response_model=Profile)
async def get_profile(profile_id: str, store: RecordStore = Depends(get_store)):
    profile = await store.get_profile(profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.patch("/{profile_id}", response_model=Profile)
async def update_profile(
    profile_id: str,
    patch: ProfilePatch,
    store: RecordStore = Depends(get_store),
):
    try:
        profile = await store.update_profile(profile_id, patch)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=describe_validation_error(e))
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.delete("/{profile_id}", response_model=DeleteResponse)
async def delete_profile(profile_id: str, store: RecordStore = Depends(get_store)):
    if not await store.delete_profile(profile_id):
        raise HTTPException(status_code=404, detail="Profile not found")
    return DeleteResponse(deleted=True, id=profile_id)
