from fastapi import APIRouter

from teamdocs.api.http import (
    auth_router, documents_router, search_router, ai_router, activities_router
)

api_router = APIRouter(prefix="/api")
api_router.include_router(auth_router)
api_router.include_router(documents_router)
api_router.include_router(search_router)
api_router.include_router(ai_router)
api_router.include_router(activities_router)
