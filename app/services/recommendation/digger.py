from typing import Any, Protocol

from loguru import logger

from app.core.config import settings


class GenreCatalog(Protocol):
    async def get_genre_page(self, genre: str, limit: int, offset: int) -> list[dict[str, Any]]: ...


class CatalogDigger:
    """
    Pages through a genre, best rated first, until enough unowned manga are found.

    Stops on the first of: quota reached, an empty page, or ``max_attempts`` pages fetched.
    A failing page fetch propagates; nothing collected so far is returned.
    """

    def __init__(
        self,
        catalog: GenreCatalog,
        quota: int | None = None,
        page_size: int | None = None,
        max_attempts: int | None = None,
    ):
        self.catalog = catalog
        self.quota = settings.RECOMMENDATION_QUOTA if quota is None else quota
        self.page_size = settings.RECOMMENDATION_PAGE_SIZE if page_size is None else page_size
        self.max_attempts = settings.RECOMMENDATION_MAX_ATTEMPTS if max_attempts is None else max_attempts

    async def dig(self, genre: str, owned_ids: set[str]) -> list[dict[str, Any]]:
        collected: list[dict[str, Any]] = []
        offset = 0
        attempts = 0

        while attempts < self.max_attempts:
            page = await self.catalog.get_genre_page(genre, limit=self.page_size, offset=offset)
            if not page:
                logger.debug(f"Catalog exhausted for {genre} at offset {offset}")
                break

            fresh = [item for item in page if str(item.get("id")) not in owned_ids]
            collected.extend(fresh)
            if len(collected) >= self.quota:
                break

            offset += self.page_size
            attempts += 1

        logger.info(f"Dug {len(collected)} unowned {genre} manga (last offset {offset}, quota {self.quota})")
        return collected
