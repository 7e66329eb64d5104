from typing import Any

import httpx
from async_lru import alru_cache
from loguru import logger

from app.services.kitsu.client import KitsuClient


class CatalogError(Exception):
    """The catalog was unreachable or answered with something we cannot parse."""


class CatalogItemNotFound(CatalogError):
    pass


def genre_to_category(genre: str) -> str:
    """Kitsu category slug for a display genre, e.g. "Slice of life" -> "slice-of-life"."""
    return "-".join(genre.strip().lower().split())


class KitsuService:
    """
    Catalog queries used by search and recommendations.

    Every method returns raw Kitsu resource objects (``{"id", "attributes", ...}``).
    Items fetched with ``include=categories`` get an extra ``genres`` list of category titles.
    """

    def __init__(self, client: KitsuClient | None = None):
        self.client = client or KitsuClient()

    async def close(self):
        """Close the underlying HTTP client."""
        await self.client.close()

    async def _fetch(self, url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            payload = await self.client.get(url, params=params)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise CatalogItemNotFound(f"Kitsu resource not found: {url}") from e
            raise CatalogError(f"Kitsu request {url} failed with status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise CatalogError(f"Kitsu request {url} failed: {e}") from e
        except ValueError as e:
            raise CatalogError(f"Kitsu returned invalid JSON for {url}: {e}") from e

        if not isinstance(payload, dict) or not isinstance(payload.get("data"), (list, dict)):
            raise CatalogError(f"Malformed Kitsu response for {url}: missing 'data'")
        return payload

    async def _fetch_list(self, url: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        payload = await self._fetch(url, params)
        data = payload["data"]
        if not isinstance(data, list):
            raise CatalogError(f"Malformed Kitsu response for {url}: expected a list")
        return [item for item in data if isinstance(item, dict)]

    async def get_genre_page(self, genre: str, limit: int, offset: int) -> list[dict[str, Any]]:
        """One page of manga in a genre, best rated first."""
        params = {
            "filter[categories]": genre_to_category(genre),
            "sort": "-averageRating",
            "page[limit]": limit,
            "page[offset]": offset,
        }
        items = await self._fetch_list("/manga", params)
        logger.debug(f"Kitsu genre page {genre!r} offset={offset}: {len(items)} items")
        return items

    @alru_cache(maxsize=32, ttl=1800)  # 30 mins
    async def get_trending(self, limit: int = 20) -> list[dict[str, Any]]:
        """Currently trending manga."""
        return await self._fetch_list("/trending/manga", {"limit": limit})

    async def search(self, text: str, limit: int, offset: int = 0) -> list[dict[str, Any]]:
        """Free-text search with genres attached."""
        params = {
            "filter[text]": text,
            "page[limit]": limit,
            "page[offset]": offset,
            "include": "categories",
        }
        payload = await self._fetch("/manga", params)
        if not isinstance(payload["data"], list):
            raise CatalogError("Malformed Kitsu search response: expected a list")
        return self._attach_genres(payload)

    async def get_manga(self, kitsu_id: str) -> dict[str, Any]:
        """A single manga by Kitsu ID, with genres attached."""
        payload = await self._fetch(f"/manga/{kitsu_id}", {"include": "categories"})
        if not isinstance(payload["data"], dict):
            raise CatalogError(f"Malformed Kitsu response for manga {kitsu_id}")
        return self._attach_genres(payload)[0]

    @staticmethod
    def _attach_genres(payload: dict[str, Any]) -> list[dict[str, Any]]:
        titles = {}
        for included in payload.get("included") or []:
            if not isinstance(included, dict) or included.get("type") != "categories":
                continue
            title = (included.get("attributes") or {}).get("title")
            if title:
                titles[included.get("id")] = title

        data = payload["data"]
        items = [item for item in (data if isinstance(data, list) else [data]) if isinstance(item, dict)]
        for item in items:
            refs = ((item.get("relationships") or {}).get("categories") or {}).get("data") or []
            item["genres"] = [titles[ref["id"]] for ref in refs if isinstance(ref, dict) and ref.get("id") in titles]
        return items


kitsu_service = KitsuService()
