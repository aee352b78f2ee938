from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from talent_directory.dependencies import get_store
from talent_directory.schemas import ImportReport
from talent_directory.services.bulk_transfer import import_profiles_csv
from talent_directory.services.record_store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/csv", response_model=ImportReport)
async def import_csv(
    file: UploadFile = File(...),
    store: RecordStore = Depends(get_store),
):
    """Import profiles from an uploaded CSV export."""
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file provided")
    if not file.filename.lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail="Only CSV files are supported")

    raw = await file.read()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV file must be UTF-8 encoded")

    logger.info("Importing profiles from %s (%d bytes)", file.filename, len(raw))
    return await import_profiles_csv(store, text)
