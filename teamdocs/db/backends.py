import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from teamdocs.core.clock import Clock, utcnow
from teamdocs.core.config import Settings
from teamdocs.core.db import create_engine, create_session_factory
from teamdocs.db.models import Base
from teamdocs.db.repositories import (
    DocumentRepository, MemoryDocumentRepository, MemoryStore, MemoryUserRepository,
    SqlDocumentRepository, SqlUserRepository, UserRepository
)

logger = logging.getLogger(__name__)


@dataclass
class Repositories:
    users: UserRepository
    documents: DocumentRepository


class StorageBackend(ABC):
    """Источник репозиториев, выбираемый при старте приложения"""

    name: str

    async def startup(self) -> None:
        pass

    async def shutdown(self) -> None:
        pass

    @abstractmethod
    def open(self) -> "AsyncIterator[Repositories]":
        """Асинхронный контекст с репозиториями на один запрос"""


class MemoryBackend(StorageBackend):
    name = "memory"

    def __init__(self, clock: Clock = utcnow):
        self.store = MemoryStore()
        self.clock = clock

    @asynccontextmanager
    async def open(self) -> AsyncIterator[Repositories]:
        yield Repositories(
            users=MemoryUserRepository(self.store),
            documents=MemoryDocumentRepository(self.store, clock=self.clock)
        )


class SqlBackend(StorageBackend):
    name = "sql"

    def __init__(self, settings: Settings, clock: Clock = utcnow):
        self.settings = settings
        self.clock = clock
        self.engine = create_engine(settings)
        self.session_factory = create_session_factory(self.engine)

    async def startup(self) -> None:
        if self.settings.create_tables:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created")

    async def shutdown(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def open(self) -> AsyncIterator[Repositories]:
        # Один сеанс на запрос: репозитории пользователей и документов делят транзакцию
        async with self.session_factory() as session:
            yield Repositories(
                users=SqlUserRepository(session),
                documents=SqlDocumentRepository(session, clock=self.clock)
            )


def create_backend(settings: Settings, clock: Clock = utcnow) -> StorageBackend:
    """Выбор хранилища по настройке STORAGE_BACKEND"""
    if settings.storage_backend == "sql":
        backend = SqlBackend(settings, clock=clock)
    else:
        backend = MemoryBackend(clock=clock)
    logger.info(f"Using {backend.name} storage backend")
    return backend
