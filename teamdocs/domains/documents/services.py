from typing import List, Optional, TYPE_CHECKING
import logging
import uuid

from teamdocs.core.errors import PermissionDeniedError
from teamdocs.domains.documents.entities import (
    ActivityEntry, Document, DocumentDetails, DocumentVersion, DocumentWithUser
)
from teamdocs.domains.documents.schemas import DocumentCreate, DocumentUpdate
from teamdocs.domains.identity.entities import User

if TYPE_CHECKING:
    from teamdocs.db.repositories.base import DocumentRepository

logger = logging.getLogger(__name__)


class DocumentService:
    """Сервис для работы с документами: проверка прав поверх хранилища"""

    def __init__(self, document_repository: "DocumentRepository"):
        self.document_repository = document_repository

    async def create_document(self, document_data: DocumentCreate, author: User) -> Document:
        """Создание нового документа"""
        return await self.document_repository.create(document_data.model_dump(), author.id)

    async def get_document(self, document_id: uuid.UUID) -> Optional[DocumentDetails]:
        """Получение документа с автором и версиями"""
        return await self.document_repository.get(document_id)

    async def list_documents(self) -> List[DocumentWithUser]:
        """Получение списка документов"""
        return await self.document_repository.list()

    async def update_document(
        self,
        document_id: uuid.UUID,
        update_data: DocumentUpdate,
        user: User
    ) -> Optional[Document]:
        """Обновление документа"""
        details = await self.document_repository.get(document_id)

        if not details:
            return None

        self._check_can_modify(details, user)

        return await self.document_repository.update(
            document_id,
            update_data.changes(),
            user.id,
            expected_version=update_data.expected_version
        )

    async def delete_document(self, document_id: uuid.UUID, user: User) -> bool:
        """Удаление документа"""
        details = await self.document_repository.get(document_id)

        if not details:
            return False

        self._check_can_modify(details, user)

        return await self.document_repository.delete(document_id, actor_id=user.id)

    async def get_document_versions(self, document_id: uuid.UUID) -> List[DocumentVersion]:
        """Получение версий документа"""
        return await self.document_repository.list_versions(document_id)

    async def recent_activities(self, limit: int = 10) -> List[ActivityEntry]:
        """Последние действия по всем документам"""
        return await self.document_repository.recent_activities(limit)

    def _check_can_modify(self, details: DocumentDetails, user: User) -> None:
        # Редактировать и удалять может автор или администратор
        if not user.can_modify(details.document.author_id):
            logger.warning(f"User {user.id} denied access to document {details.document.id}")
            raise PermissionDeniedError("Permission denied")
