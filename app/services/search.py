import asyncio
from typing import Any

from loguru import logger
from pydantic import ValidationError

from app.models.catalog import FromCatalogRequest, NewCandidate, OwnedEntry, SearchPage
from app.models.library import LibraryEntry
from app.services.kitsu.service import CatalogError, KitsuService
from app.services.library_store import LibraryStore
from app.services.recommendation.merger import extract_title, parse_average_rating


def to_new_candidate(item: dict[str, Any]) -> NewCandidate:
    attributes = item.get("attributes") or {}
    poster = attributes.get("posterImage") or {}
    return NewCandidate(
        kitsu_id=str(item["id"]),
        title=extract_title(attributes),
        cover_image=poster.get("small"),
        synopsis=attributes.get("synopsis"),
        genres=[g for g in item.get("genres", []) if isinstance(g, str)],
        average_rating=parse_average_rating(attributes.get("averageRating")),
    )


class SearchService:
    """Catalog search annotated with library ownership, and adding search results to the library."""

    def __init__(self, catalog: KitsuService, library: LibraryStore):
        self.catalog = catalog
        self.library = library

    async def search(self, query: str, offset: int, limit: int, user_id: str | None = None) -> SearchPage:
        raw_items, entries = await asyncio.gather(
            self.catalog.search(query, limit=limit, offset=offset),
            self.library.list_entries(user_id),
        )
        owned = {entry.kitsu_id: entry for entry in entries}

        results: list[NewCandidate | OwnedEntry] = []
        for item in raw_items:
            if item.get("id") is None:
                continue
            kitsu_id = str(item["id"])
            if kitsu_id in owned:
                results.append(OwnedEntry(entry=owned[kitsu_id]))
            else:
                results.append(to_new_candidate(item))

        next_offset = offset + limit if len(raw_items) >= limit else None
        logger.debug(f"Search {query!r} offset={offset}: {len(results)} hits, {len(owned)} owned in scope")
        return SearchPage(results=results, next_offset=next_offset)

    async def add_from_catalog(self, request: FromCatalogRequest) -> LibraryEntry:
        """Fetch a catalog item and persist it; the candidate only becomes an entry here."""
        item = await self.catalog.get_manga(request.kitsu_id)
        try:
            entry = to_new_candidate(item).to_entry(request.status, request.rating, request.user_id)
        except (KeyError, ValidationError) as exc:
            raise CatalogError(f"Catalog item {request.kitsu_id} cannot be saved: {exc}") from exc
        return await self.library.create(entry)
