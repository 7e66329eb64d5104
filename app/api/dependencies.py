from fastapi import Depends

from app.services.kitsu.service import KitsuService, kitsu_service
from app.services.library_store import LibraryStore, library_store
from app.services.recommendation.service import RecommendationService
from app.services.search import SearchService


def get_catalog() -> KitsuService:
    return kitsu_service


def get_library_store() -> LibraryStore:
    return library_store


def get_recommendation_service(
    catalog: KitsuService = Depends(get_catalog), library: LibraryStore = Depends(get_library_store)
) -> RecommendationService:
    return RecommendationService(catalog, library)


def get_search_service(
    catalog: KitsuService = Depends(get_catalog), library: LibraryStore = Depends(get_library_store)
) -> SearchService:
    return SearchService(catalog, library)
