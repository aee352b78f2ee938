import uvicorn

from talent_directory.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "talent_directory.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
