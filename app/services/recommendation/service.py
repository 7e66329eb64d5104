import asyncio
from typing import Any, Protocol

from loguru import logger

from app.core.config import settings
from app.models.catalog import RecommendationResult
from app.models.library import LibraryEntry
from app.services.recommendation.digger import CatalogDigger, GenreCatalog
from app.services.recommendation.merger import ResultMerger
from app.services.recommendation.scorer import PreferenceScorer


class RecommendationCatalog(GenreCatalog, Protocol):
    async def get_trending(self, limit: int = 20) -> list[dict[str, Any]]: ...


class LibraryReader(Protocol):
    async def list_entries(self, user_id: str | None = None) -> list[LibraryEntry]: ...


class RecommendationService:
    """
    "Because you read..." recommendations.

    Everything is derived per call from the current library snapshot; nothing is kept between requests.
    """

    def __init__(self, catalog: RecommendationCatalog, library: LibraryReader):
        self.catalog = catalog
        self.library = library

    async def recommend(self, genre: str | None = None, user_id: str | None = None) -> RecommendationResult:
        entries = await self.library.list_entries(user_id)

        scores = PreferenceScorer.score(entries)
        target = PreferenceScorer.select_genre(scores, genre)
        owned_ids = {entry.kitsu_id for entry in entries}
        logger.info(
            f"Recommending {target} for scope {user_id or 'default'} "
            f"({len(entries)} entries, {len(scores)} genres scored, override={genre!r})"
        )

        digger = CatalogDigger(self.catalog)
        dug, trending = await asyncio.gather(
            digger.dig(target, owned_ids),
            self.catalog.get_trending(settings.TRENDING_LIMIT),
        )

        merger = ResultMerger()
        return RecommendationResult(
            selected_genre=target,
            available_genres=merger.available_genres(scores),
            based_on_taste=merger.merge(dug),
            trending=merger.merge(trending),
        )
