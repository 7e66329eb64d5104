from fastapi import APIRouter, Depends
from loguru import logger

from app.api.dependencies import get_library_store
from app.services.library_store import LibraryStore, StorageUnavailable

router = APIRouter(tags=["health"])


@router.get("/health", summary="Simple readiness check")
async def health_check() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/storage", summary="Redis reachability")
async def storage_check(store: LibraryStore = Depends(get_library_store)) -> dict[str, str]:
    try:
        await store.ping()
    except StorageUnavailable as exc:
        logger.warning(f"Storage health check failed: {exc}")
        return {"redis": "unavailable"}
    return {"redis": "ok"}
