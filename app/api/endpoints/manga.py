from fastapi import APIRouter, Depends, HTTPException, Query, Response
from loguru import logger

from app.api.dependencies import get_library_store, get_search_service
from app.models.catalog import FromCatalogRequest
from app.models.library import LibraryEntry, LibraryEntryCreate, LibraryEntryUpdate
from app.services.kitsu.service import CatalogError, CatalogItemNotFound
from app.services.library_store import DuplicateEntryError, LibraryStore, StorageUnavailable
from app.services.search import SearchService

router = APIRouter(prefix="/api/manga", tags=["library"])


def _storage_unavailable(exc: StorageUnavailable) -> HTTPException:
    return HTTPException(status_code=503, detail=str(exc))


@router.get("", response_model=list[LibraryEntry])
async def list_manga(
    user_id: str | None = Query(default=None, alias="userId"),
    store: LibraryStore = Depends(get_library_store),
):
    try:
        return await store.list_entries(user_id)
    except StorageUnavailable as exc:
        raise _storage_unavailable(exc)


@router.post("", response_model=LibraryEntry, status_code=201)
async def add_manga(payload: LibraryEntryCreate, store: LibraryStore = Depends(get_library_store)):
    try:
        return await store.create(payload)
    except DuplicateEntryError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except StorageUnavailable as exc:
        raise _storage_unavailable(exc)


@router.post("/from-catalog", response_model=LibraryEntry, status_code=201)
async def add_manga_from_catalog(payload: FromCatalogRequest, search: SearchService = Depends(get_search_service)):
    """Save a catalog search result straight into the library."""
    try:
        return await search.add_from_catalog(payload)
    except CatalogItemNotFound:
        raise HTTPException(status_code=404, detail=f"Manga {payload.kitsu_id} not found in catalog")
    except CatalogError as exc:
        logger.error(f"Catalog lookup for {payload.kitsu_id} failed: {exc}")
        raise HTTPException(status_code=502, detail=str(exc))
    except DuplicateEntryError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except StorageUnavailable as exc:
        raise _storage_unavailable(exc)


@router.get("/{entry_id}", response_model=LibraryEntry)
async def get_manga(entry_id: str, store: LibraryStore = Depends(get_library_store)):
    try:
        entry = await store.get(entry_id)
    except StorageUnavailable as exc:
        raise _storage_unavailable(exc)
    if entry is None:
        raise HTTPException(status_code=404, detail="Manga not found")
    return entry


@router.patch("/{entry_id}", response_model=LibraryEntry)
async def update_manga(entry_id: str, changes: LibraryEntryUpdate, store: LibraryStore = Depends(get_library_store)):
    try:
        entry = await store.update(entry_id, changes)
    except StorageUnavailable as exc:
        raise _storage_unavailable(exc)
    if entry is None:
        raise HTTPException(status_code=404, detail="Manga not found")
    return entry


@router.delete("/{entry_id}", status_code=204)
async def delete_manga(entry_id: str, store: LibraryStore = Depends(get_library_store)) -> Response:
    try:
        deleted = await store.delete(entry_id)
    except StorageUnavailable as exc:
        raise _storage_unavailable(exc)
    if not deleted:
        raise HTTPException(status_code=404, detail="Manga not found")
    return Response(status_code=204)
