from fastapi import HTTPException, Request

from talent_directory.services.record_store import RecordStore


def get_store(request: Request) -> RecordStore:
    """FastAPI dependency that returns the store opened by the app lifespan."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Record store is not available")
    return store
