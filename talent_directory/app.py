import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from talent_directory.config import settings
from talent_directory.services.persistence import PersistenceError
from talent_directory.services.record_store import RecordStore, open_record_store
from talent_directory.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(store: Optional[RecordStore] = None) -> FastAPI:
    """Build the API. Without a store, the configured backend is opened at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging()
        if store is None:
            app.state.store = await open_record_store(settings)
        else:
            app.state.store = await store.initialize()
        logger.info("%s started", settings.app_name)
        yield
        await app.state.store.close()
        app.state.store = None

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        lifespan=lifespan,
    )

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Storage failure, nothing was changed"})

    # Register routes
    from talent_directory.routes.health import router as health_router
    from talent_directory.routes.api_profiles import router as profiles_router
    from talent_directory.routes.api_skills import router as skills_router
    from talent_directory.routes.api_transfer import router as transfer_router

    app.include_router(health_router, tags=["health"])
    app.include_router(profiles_router, prefix="/api/profiles", tags=["profiles"])
    app.include_router(skills_router, prefix="/api/skills", tags=["skills"])
    app.include_router(transfer_router, prefix="/api/import", tags=["import"])

    return app
