import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from teamdocs import __version__
from teamdocs.api.http.health import router as health_router
from teamdocs.api.router import api_router
from teamdocs.core.config import Settings, settings as default_settings
from teamdocs.db.backends import StorageBackend, create_backend
from teamdocs.domains.assistant.generators import GeminiTextGenerator, TextGenerator

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def create_app(
    settings: Optional[Settings] = None,
    backend: Optional[StorageBackend] = None,
    generator: Optional[TextGenerator] = None
) -> FastAPI:
    """Сборка приложения; хранилище и генератор можно подменить в тестах"""
    settings = settings or default_settings
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await app.state.backend.startup()
        logger.info("TeamDocs started")
        yield
        await app.state.backend.shutdown()

    app = FastAPI(
        title="TeamDocs",
        description="Team knowledge base with version history and AI assistance",
        version=__version__,
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.backend = backend or create_backend(settings)
    app.state.generator = generator or GeminiTextGenerator(settings.gemini_api_key)

    # Настройка CORS для работы с frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # В продакшене указать конкретные домены
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid input", "errors": jsonable_encoder(exc.errors())}
        )

    # Подключаем роутеры
    app.include_router(health_router)
    app.include_router(api_router)

    return app


app = create_app()
