from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger

from app.api.dependencies import get_search_service
from app.core.config import settings
from app.models.catalog import SearchPage
from app.services.kitsu.service import CatalogError
from app.services.library_store import StorageUnavailable
from app.services.search import SearchService

router = APIRouter(prefix="/api/search", tags=["search"])


@router.get("", response_model=SearchPage)
async def search_manga(
    q: str = Query(min_length=1, description="Free-text title search"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=settings.SEARCH_PAGE_SIZE, ge=1, le=20),
    user_id: str | None = Query(default=None, alias="userId"),
    search: SearchService = Depends(get_search_service),
):
    query = q.strip()
    if not query:
        raise HTTPException(status_code=400, detail="Search query must not be blank")
    try:
        return await search.search(query, offset=offset, limit=limit, user_id=user_id)
    except CatalogError as exc:
        logger.error(f"Catalog search for {query!r} failed: {exc}")
        raise HTTPException(status_code=502, detail=str(exc))
    except StorageUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc))
