from fastapi import APIRouter, Request

from teamdocs import __version__

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request):
    """Проверка работоспособности сервиса"""
    return {
        "status": "ok",
        "version": __version__,
        "storage": request.app.state.backend.name
    }
