from fastapi import APIRouter

from .endpoints.health import router as health_router
from .endpoints.manga import router as manga_router
from .endpoints.recommendations import router as recommendations_router
from .endpoints.search import router as search_router

api_router = APIRouter()


@api_router.get("/")
async def root():
    return {"message": "Mangashelf API is running"}


api_router.include_router(health_router)
api_router.include_router(manga_router)
api_router.include_router(search_router)
api_router.include_router(recommendations_router)
