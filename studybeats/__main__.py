import uvicorn

from studybeats.core.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "studybeats.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower()
    )
