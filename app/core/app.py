import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from app.api.main import api_router
from app.services.kitsu.service import kitsu_service
from app.services.library_store import library_store

from .config import settings
from .version import __version__

logger.remove()
logger.add(sys.stderr, level=settings.LOG_LEVEL.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events (startup/shutdown).
    """
    logger.info(f"Mangashelf {__version__} starting ({settings.APP_ENV})")
    yield
    try:
        await kitsu_service.close()
        logger.info("Kitsu HTTP client closed")
    except Exception as exc:
        logger.warning(f"Failed to close Kitsu HTTP client: {exc}")
    try:
        await library_store.close()
    except Exception as exc:
        logger.warning(f"Failed to close library Redis client: {exc}")


app = FastAPI(
    title="Mangashelf",
    description="Personal manga list with genre-based recommendations from Kitsu",
    version=__version__,
    lifespan=lifespan,
    docs_url=None if settings.APP_ENV != "development" else "/docs",
    redoc_url=None if settings.APP_ENV != "development" else "/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)
