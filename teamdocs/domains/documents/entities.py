import enum
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, List, Mapping, Optional

from teamdocs.core.clock import utcnow
from teamdocs.domains.identity.entities import User

EDITABLE_FIELDS = ("title", "content", "summary", "tags")

INITIAL_VERSION_DESCRIPTION = "Initial version"
UPDATE_VERSION_DESCRIPTION = "Document updated"


class ActivityType(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


def _normalize(changes: Mapping[str, Any]) -> dict:
    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown document fields: {', '.join(sorted(unknown))}")
    normalized = dict(changes)
    if "tags" in normalized:
        normalized["tags"] = list(normalized["tags"] or [])
    return normalized


@dataclass
class DocumentVersion:
    """Неизменяемый снимок документа"""

    id: uuid.UUID
    document_id: uuid.UUID
    title: str
    content: str
    summary: Optional[str]
    tags: List[str]
    version: int
    author_id: uuid.UUID
    created_at: datetime
    change_description: Optional[str] = None


@dataclass
class Document:
    """Сущность документа домена Documents"""

    id: uuid.UUID
    title: str
    content: str
    author_id: uuid.UUID
    summary: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    version: int = 1
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def create_document(
        cls,
        fields: Mapping[str, Any],
        author_id: uuid.UUID,
        now: Optional[datetime] = None
    ) -> "Document":
        """Создание нового документа версии 1"""
        data = _normalize(fields)
        now = now or utcnow()
        return cls(
            id=uuid.uuid4(),
            title=data["title"],
            content=data.get("content", ""),
            summary=data.get("summary"),
            tags=data.get("tags", []),
            author_id=author_id,
            version=1,
            created_at=now,
            updated_at=now
        )

    def apply_changes(self, changes: Mapping[str, Any], now: Optional[datetime] = None) -> "Document":
        """Новое состояние документа: поля из changes поверх текущих, версия + 1"""
        return replace(
            self,
            **_normalize(changes),
            version=self.version + 1,
            updated_at=now or utcnow()
        )

    def snapshot(
        self,
        author_id: uuid.UUID,
        change_description: Optional[str],
        now: Optional[datetime] = None
    ) -> DocumentVersion:
        """Снимок текущего состояния для журнала версий"""
        return DocumentVersion(
            id=uuid.uuid4(),
            document_id=self.id,
            title=self.title,
            content=self.content,
            summary=self.summary,
            tags=list(self.tags),
            version=self.version,
            author_id=author_id,
            created_at=now or utcnow(),
            change_description=change_description
        )

    def matches(self, query: str) -> bool:
        """Регистронезависимый поиск подстроки в заголовке, тексте, описании и тегах"""
        needle = query.lower()
        return (
            needle in self.title.lower()
            or needle in self.content.lower()
            or (self.summary is not None and needle in self.summary.lower())
            or any(needle in tag.lower() for tag in self.tags)
        )


@dataclass
class Activity:
    """Запись журнала действий"""

    id: uuid.UUID
    type: ActivityType
    user_id: uuid.UUID
    description: str
    document_id: Optional[uuid.UUID] = None
    created_at: datetime = field(default_factory=utcnow)

    @classmethod
    def record(
        cls,
        type: ActivityType,
        user_id: uuid.UUID,
        title: str,
        document_id: Optional[uuid.UUID] = None,
        now: Optional[datetime] = None
    ) -> "Activity":
        return cls(
            id=uuid.uuid4(),
            type=type,
            user_id=user_id,
            description=f'{type.value.capitalize()} document "{title}"',
            document_id=document_id,
            created_at=now or utcnow()
        )


@dataclass
class DocumentWithUser:
    document: Document
    author: User


@dataclass
class DocumentDetails:
    document: Document
    author: User
    versions: List[DocumentVersion]


@dataclass
class ActivityEntry:
    activity: Activity
    user: User
    document: Optional[Document] = None
