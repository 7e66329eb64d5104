from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger

from app.api.dependencies import get_recommendation_service
from app.models.catalog import RecommendationResult
from app.services.library_store import StorageUnavailable
from app.services.recommendation.service import RecommendationService

router = APIRouter(prefix="/api/recommendations", tags=["recommendations"])


@router.get("", response_model=RecommendationResult)
async def get_recommendations(
    genre: str | None = Query(default=None, description="Genre to recommend instead of the top scored one"),
    user_id: str | None = Query(default=None, alias="userId"),
    service: RecommendationService = Depends(get_recommendation_service),
):
    """
    Recommendations for the library's favourite genre (or ``genre``) plus the global trending list.
    """
    try:
        return await service.recommend(genre=genre, user_id=user_id)
    except HTTPException:
        raise
    except StorageUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    except Exception as e:
        logger.exception(f"Error building recommendations (genre={genre!r}, user={user_id!r}): {e}")
        raise HTTPException(status_code=500, detail=str(e))
