import uuid
from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from teamdocs.domains.documents.entities import (
    ActivityEntry, Document, DocumentDetails, DocumentVersion, DocumentWithUser
)
from teamdocs.domains.identity.entities import User


class UserRepository(ABC):
    """Хранилище пользователей"""

    @abstractmethod
    async def create(self, user: User) -> User:
        """Создание пользователя; ValueError при занятом email"""

    @abstractmethod
    async def get(self, user_id: uuid.UUID) -> Optional[User]:
        ...

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    async def update(self, user: User) -> Optional[User]:
        """Сохранение полей профиля"""

    async def email_exists(self, email: str) -> bool:
        return await self.get_by_email(email) is not None


class DocumentRepository(ABC):
    """Версионируемое хранилище документов с журналом действий.

    Каждая мутация (create, update, delete) выполняется одной транзакцией:
    документ, снимок версии и запись журнала пишутся вместе или не пишутся
    вовсе. Отсутствие документа возвращается как None/False, а не исключение.
    """

    @abstractmethod
    async def create(self, fields: Mapping[str, Any], author_id: uuid.UUID) -> Document:
        """Создание документа версии 1 со снимком и записью created"""

    @abstractmethod
    async def update(
        self,
        document_id: uuid.UUID,
        changes: Mapping[str, Any],
        editor_id: uuid.UUID,
        expected_version: Optional[int] = None
    ) -> Optional[Document]:
        """Частичное обновление: версия + 1, снимок и запись updated.

        Поля, отсутствующие в changes, сохраняют прежние значения. Если задан
        expected_version и он не совпадает с текущей версией, поднимается
        VersionConflictError и ничего не пишется.
        """

    @abstractmethod
    async def delete(self, document_id: uuid.UUID, actor_id: Optional[uuid.UUID] = None) -> bool:
        """Удаление документа вместе со всеми версиями и записями журнала"""

    @abstractmethod
    async def get(self, document_id: uuid.UUID) -> Optional[DocumentDetails]:
        """Документ с автором и версиями (новые первыми)"""

    @abstractmethod
    async def list(self) -> List[DocumentWithUser]:
        """Все документы с авторами, по updated_at по убыванию"""

    async def search(self, query: str) -> List[DocumentWithUser]:
        """Поиск подстроки без учета регистра; порядок как у list()"""
        return [item for item in await self.list() if item.document.matches(query)]

    @abstractmethod
    async def list_versions(self, document_id: uuid.UUID) -> List[DocumentVersion]:
        """Версии документа, новые первыми"""

    @abstractmethod
    async def recent_activities(self, limit: int = 10) -> List[ActivityEntry]:
        """Последние действия с пользователем и документом"""
