from fastapi import APIRouter, Depends

from talent_directory.config import settings
from talent_directory.dependencies import get_store
from talent_directory.services.record_store import RecordStore

router = APIRouter()


@router.get("/health")
async def health(store: RecordStore = Depends(get_store)):
    return {
        "status": "ok" if store.initialized else "starting",
        "app": settings.app_name,
        "storage": type(store.adapter).__name__,
    }
