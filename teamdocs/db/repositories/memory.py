import asyncio
import copy
import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional

from teamdocs.core.clock import Clock, utcnow
from teamdocs.core.errors import VersionConflictError
from teamdocs.db.repositories.base import DocumentRepository, UserRepository
from teamdocs.domains.documents.entities import (
    Activity, ActivityEntry, ActivityType, Document, DocumentDetails, DocumentVersion,
    DocumentWithUser, INITIAL_VERSION_DESCRIPTION, UPDATE_VERSION_DESCRIPTION
)
from teamdocs.domains.identity.entities import User

logger = logging.getLogger(__name__)


class MemoryStore:
    """Записи в памяти процесса; одна копия на приложение"""

    def __init__(self):
        self.users: Dict[uuid.UUID, User] = {}
        self.documents: Dict[uuid.UUID, Document] = {}
        self.versions: Dict[uuid.UUID, DocumentVersion] = {}
        self.activities: Dict[uuid.UUID, Activity] = {}
        # Мутации сериализуются; внутри блокировки нет await
        self.lock = asyncio.Lock()


class MemoryUserRepository(UserRepository):
    """Репозиторий пользователей в памяти"""

    def __init__(self, store: MemoryStore):
        self.store = store

    async def create(self, user: User) -> User:
        async with self.store.lock:
            if self._find_by_email(user.email) is not None:
                raise ValueError("User already exists")
            self.store.users[user.id] = copy.copy(user)
        return copy.copy(user)

    async def get(self, user_id: uuid.UUID) -> Optional[User]:
        user = self.store.users.get(user_id)
        return copy.copy(user) if user else None

    async def get_by_email(self, email: str) -> Optional[User]:
        user = self._find_by_email(email)
        return copy.copy(user) if user else None

    async def update(self, user: User) -> Optional[User]:
        async with self.store.lock:
            existing = self.store.users.get(user.id)
            if existing is None:
                return None
            existing.name = user.name
            existing.updated_at = user.updated_at
        return await self.get(user.id)

    def _find_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.store.users.values() if u.email == email), None)


class MemoryDocumentRepository(DocumentRepository):
    """Репозиторий документов в памяти (тесты и разработка)"""

    def __init__(self, store: MemoryStore, clock: Clock = utcnow):
        self.store = store
        self.clock = clock

    async def create(self, fields: Mapping[str, Any], author_id: uuid.UUID) -> Document:
        now = self.clock()
        async with self.store.lock:
            self._require_user(author_id)
            document = Document.create_document(fields, author_id, now)
            version = document.snapshot(author_id, INITIAL_VERSION_DESCRIPTION, now)
            activity = Activity.record(ActivityType.CREATED, author_id, document.title, document.id, now)

            self.store.documents[document.id] = document
            self.store.versions[version.id] = version
            self.store.activities[activity.id] = activity

        logger.info(f"Document {document.id} created by {author_id}")
        return copy.deepcopy(document)

    async def update(
        self,
        document_id: uuid.UUID,
        changes: Mapping[str, Any],
        editor_id: uuid.UUID,
        expected_version: Optional[int] = None
    ) -> Optional[Document]:
        now = self.clock()
        async with self.store.lock:
            current = self.store.documents.get(document_id)
            if current is None:
                return None
            if expected_version is not None and expected_version != current.version:
                raise VersionConflictError(document_id, expected_version, current.version)
            self._require_user(editor_id)

            document = current.apply_changes(changes, now)
            version = document.snapshot(editor_id, UPDATE_VERSION_DESCRIPTION, now)
            activity = Activity.record(ActivityType.UPDATED, editor_id, document.title, document.id, now)

            self.store.documents[document.id] = document
            self.store.versions[version.id] = version
            self.store.activities[activity.id] = activity

        logger.info(f"Document {document_id} updated to version {document.version} by {editor_id}")
        return copy.deepcopy(document)

    async def delete(self, document_id: uuid.UUID, actor_id: Optional[uuid.UUID] = None) -> bool:
        now = self.clock()
        async with self.store.lock:
            document = self.store.documents.get(document_id)
            if document is None:
                return False
            if actor_id is not None:
                self._require_user(actor_id)

            # Сначала зависимые записи, затем сам документ
            for version_id in [v.id for v in self.store.versions.values() if v.document_id == document_id]:
                del self.store.versions[version_id]
            for activity_id in [a.id for a in self.store.activities.values() if a.document_id == document_id]:
                del self.store.activities[activity_id]
            del self.store.documents[document_id]

            if actor_id is not None:
                activity = Activity.record(ActivityType.DELETED, actor_id, document.title, None, now)
                self.store.activities[activity.id] = activity

        logger.info(f"Document {document_id} deleted")
        return True

    async def get(self, document_id: uuid.UUID) -> Optional[DocumentDetails]:
        document = self.store.documents.get(document_id)
        if document is None:
            return None
        author = self.store.users.get(document.author_id)
        if author is None:
            return None
        return DocumentDetails(
            document=copy.deepcopy(document),
            author=copy.copy(author),
            versions=await self.list_versions(document_id)
        )

    async def list(self) -> List[DocumentWithUser]:
        result = []
        for document in self.store.documents.values():
            author = self.store.users.get(document.author_id)
            if author is not None:
                result.append(DocumentWithUser(document=copy.deepcopy(document), author=copy.copy(author)))
        return sorted(result, key=lambda item: item.document.updated_at, reverse=True)

    async def list_versions(self, document_id: uuid.UUID) -> List[DocumentVersion]:
        versions = [copy.deepcopy(v) for v in self.store.versions.values() if v.document_id == document_id]
        return sorted(versions, key=lambda v: v.version, reverse=True)

    async def recent_activities(self, limit: int = 10) -> List[ActivityEntry]:
        # reversed() сохраняет порядок вставки для равных отметок времени
        activities = sorted(
            reversed(list(self.store.activities.values())),
            key=lambda a: a.created_at,
            reverse=True
        )[:limit]

        entries = []
        for activity in activities:
            user = self.store.users.get(activity.user_id)
            if user is None:
                continue
            document = self.store.documents.get(activity.document_id) if activity.document_id else None
            entries.append(ActivityEntry(
                activity=copy.copy(activity),
                user=copy.copy(user),
                document=copy.deepcopy(document) if document else None
            ))
        return entries

    def _require_user(self, user_id: uuid.UUID) -> None:
        if user_id not in self.store.users:
            raise ValueError(f"Unknown user {user_id}")
