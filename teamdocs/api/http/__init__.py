from teamdocs.api.http.health import router as health_router
from teamdocs.api.http.auth import router as auth_router
from teamdocs.api.http.documents import router as documents_router
from teamdocs.api.http.search import router as search_router
from teamdocs.api.http.ai import router as ai_router
from teamdocs.api.http.activities import router as activities_router

__all__ = [
    "health_router",
    "auth_router",
    "documents_router",
    "search_router",
    "ai_router",
    "activities_router"
]
