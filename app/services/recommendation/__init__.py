"""
Genre-based recommendations: score the library, dig the catalog, merge the results.
"""

from app.services.recommendation.digger import CatalogDigger
from app.services.recommendation.merger import ResultMerger
from app.services.recommendation.scorer import PreferenceScorer
from app.services.recommendation.service import RecommendationService

__all__ = [
    "CatalogDigger",
    "PreferenceScorer",
    "RecommendationService",
    "ResultMerger",
]
