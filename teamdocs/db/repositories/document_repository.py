from typing import Any, List, Mapping, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
import logging
import uuid

from teamdocs.core.clock import Clock, utcnow
from teamdocs.core.errors import VersionConflictError
from teamdocs.db.models.activity import Activity as ActivityModel
from teamdocs.db.models.document import Document as DocumentModel, DocumentVersion as DocumentVersionModel
from teamdocs.db.models.user import User as UserModel
from teamdocs.db.repositories.base import DocumentRepository
from teamdocs.db.repositories.user_repository import user_to_domain
from teamdocs.domains.documents.entities import (
    Activity, ActivityEntry, ActivityType, Document, DocumentDetails, DocumentVersion,
    DocumentWithUser, EDITABLE_FIELDS, INITIAL_VERSION_DESCRIPTION, UPDATE_VERSION_DESCRIPTION
)

logger = logging.getLogger(__name__)


class SqlDocumentRepository(DocumentRepository):
    """Репозиторий для работы с документами, версиями и журналом действий"""

    def __init__(self, session: AsyncSession, clock: Clock = utcnow):
        self.session = session
        self.clock = clock

    async def create(self, fields: Mapping[str, Any], author_id: uuid.UUID) -> Document:
        """Создание нового документа"""
        now = self.clock()
        await self._require_user(author_id)

        document = Document.create_document(fields, author_id, now)
        version = document.snapshot(author_id, INITIAL_VERSION_DESCRIPTION, now)
        activity = Activity.record(ActivityType.CREATED, author_id, document.title, document.id, now)

        self.session.add(DocumentModel(
            id=document.id,
            title=document.title,
            content=document.content,
            summary=document.summary,
            tags=list(document.tags),
            version=document.version,
            author_id=document.author_id,
            created_at=document.created_at,
            updated_at=document.updated_at
        ))
        try:
            # Документ должен попасть в БД раньше зависимых строк
            await self.session.flush()
            self.session.add_all([self._version_to_model(version), self._activity_to_model(activity)])
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("Invalid author_id")

        logger.info(f"Document {document.id} created by {author_id}")
        return document

    async def update(
        self,
        document_id: uuid.UUID,
        changes: Mapping[str, Any],
        editor_id: uuid.UUID,
        expected_version: Optional[int] = None
    ) -> Optional[Document]:
        """Обновление документа с созданием новой версии"""
        now = self.clock()
        db_document = await self._lock_document(document_id)

        if db_document is None:
            await self.session.rollback()
            return None

        if expected_version is not None and expected_version != db_document.version:
            await self.session.rollback()
            raise VersionConflictError(document_id, expected_version, db_document.version)

        await self._require_user(editor_id)

        try:
            document = self._document_to_domain(db_document).apply_changes(changes, now)
        except ValueError:
            await self.session.rollback()
            raise
        version = document.snapshot(editor_id, UPDATE_VERSION_DESCRIPTION, now)
        activity = Activity.record(ActivityType.UPDATED, editor_id, document.title, document.id, now)

        for field in EDITABLE_FIELDS:
            setattr(db_document, field, getattr(document, field))
        db_document.version = document.version
        db_document.updated_at = document.updated_at

        self.session.add_all([self._version_to_model(version), self._activity_to_model(activity)])
        try:
            await self.session.commit()
        except IntegrityError:
            # Номер версии уже занят параллельной записью
            await self.session.rollback()
            actual = await self.session.scalar(
                select(DocumentModel.version).where(DocumentModel.id == document_id)
            )
            logger.warning(f"Concurrent update of document {document_id} rejected")
            raise VersionConflictError(document_id, document.version - 1, actual)

        logger.info(f"Document {document_id} updated to version {document.version} by {editor_id}")
        return document

    async def delete(self, document_id: uuid.UUID, actor_id: Optional[uuid.UUID] = None) -> bool:
        """Удаление документа"""
        now = self.clock()
        db_document = await self._lock_document(document_id)

        if db_document is None:
            await self.session.rollback()
            return False

        if actor_id is not None:
            await self._require_user(actor_id)

        title = db_document.title

        # Сначала зависимые записи, затем сам документ
        await self.session.execute(
            delete(DocumentVersionModel).where(DocumentVersionModel.document_id == document_id)
        )
        await self.session.execute(
            delete(ActivityModel).where(ActivityModel.document_id == document_id)
        )
        await self.session.execute(
            delete(DocumentModel).where(DocumentModel.id == document_id)
        )

        if actor_id is not None:
            activity = Activity.record(ActivityType.DELETED, actor_id, title, None, now)
            self.session.add(self._activity_to_model(activity))

        await self.session.commit()

        logger.info(f"Document {document_id} deleted")
        return True

    async def get(self, document_id: uuid.UUID) -> Optional[DocumentDetails]:
        """Получение документа с автором и версиями"""
        result = await self.session.execute(
            select(DocumentModel, UserModel)
            .join(UserModel, DocumentModel.author_id == UserModel.id)
            .where(DocumentModel.id == document_id)
        )
        row = result.one_or_none()
        if row is None:
            return None

        db_document, db_user = row
        return DocumentDetails(
            document=self._document_to_domain(db_document),
            author=user_to_domain(db_user),
            versions=await self.list_versions(document_id)
        )

    async def list(self) -> List[DocumentWithUser]:
        """Получение всех документов"""
        result = await self.session.execute(
            select(DocumentModel, UserModel)
            .join(UserModel, DocumentModel.author_id == UserModel.id)
            .order_by(DocumentModel.updated_at.desc())
        )
        return [
            DocumentWithUser(document=self._document_to_domain(doc), author=user_to_domain(user))
            for doc, user in result.all()
        ]

    async def list_versions(self, document_id: uuid.UUID) -> List[DocumentVersion]:
        """Получение версий документа"""
        result = await self.session.execute(
            select(DocumentVersionModel)
            .where(DocumentVersionModel.document_id == document_id)
            .order_by(DocumentVersionModel.version.desc())
        )
        return [self._version_to_domain(v) for v in result.scalars().all()]

    async def recent_activities(self, limit: int = 10) -> List[ActivityEntry]:
        """Последние действия"""
        result = await self.session.execute(
            select(ActivityModel, UserModel, DocumentModel)
            .outerjoin(UserModel, ActivityModel.user_id == UserModel.id)
            .outerjoin(DocumentModel, ActivityModel.document_id == DocumentModel.id)
            .order_by(ActivityModel.created_at.desc())
            .limit(limit)
        )

        entries = []
        for db_activity, db_user, db_document in result.all():
            # Действия без пользователя пропускаются
            if db_user is None:
                continue
            entries.append(ActivityEntry(
                activity=self._activity_to_domain(db_activity),
                user=user_to_domain(db_user),
                document=self._document_to_domain(db_document) if db_document else None
            ))
        return entries

    async def _lock_document(self, document_id: uuid.UUID) -> Optional[DocumentModel]:
        result = await self.session.execute(
            select(DocumentModel)
            .where(DocumentModel.id == document_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _require_user(self, user_id: uuid.UUID) -> None:
        if await self.session.get(UserModel, user_id) is None:
            await self.session.rollback()
            raise ValueError(f"Unknown user {user_id}")

    def _document_to_domain(self, db_document: DocumentModel) -> Document:
        """Преобразование модели БД в доменную сущность"""
        return Document(
            id=db_document.id,
            title=db_document.title,
            content=db_document.content,
            summary=db_document.summary,
            tags=list(db_document.tags or []),
            author_id=db_document.author_id,
            version=db_document.version,
            created_at=db_document.created_at,
            updated_at=db_document.updated_at
        )

    def _version_to_domain(self, db_version: DocumentVersionModel) -> DocumentVersion:
        return DocumentVersion(
            id=db_version.id,
            document_id=db_version.document_id,
            title=db_version.title,
            content=db_version.content,
            summary=db_version.summary,
            tags=list(db_version.tags or []),
            version=db_version.version,
            author_id=db_version.author_id,
            created_at=db_version.created_at,
            change_description=db_version.change_description
        )

    def _activity_to_domain(self, db_activity: ActivityModel) -> Activity:
        return Activity(
            id=db_activity.id,
            type=ActivityType(db_activity.type),
            user_id=db_activity.user_id,
            description=db_activity.description,
            document_id=db_activity.document_id,
            created_at=db_activity.created_at
        )

    def _version_to_model(self, version: DocumentVersion) -> DocumentVersionModel:
        return DocumentVersionModel(
            id=version.id,
            document_id=version.document_id,
            title=version.title,
            content=version.content,
            summary=version.summary,
            tags=list(version.tags),
            version=version.version,
            author_id=version.author_id,
            created_at=version.created_at,
            change_description=version.change_description
        )

    def _activity_to_model(self, activity: Activity) -> ActivityModel:
        return ActivityModel(
            id=activity.id,
            type=activity.type.value,
            user_id=activity.user_id,
            description=activity.description,
            document_id=activity.document_id,
            created_at=activity.created_at
        )
