from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Any, Dict, Optional, List
import uuid
from datetime import datetime

from teamdocs.domains.documents.entities import ActivityEntry, DocumentDetails, DocumentWithUser
from teamdocs.domains.identity.schemas import UserResponse


def _clean_tags(tags):
    if tags is None:
        return tags
    return [tag.strip() for tag in tags if tag and tag.strip()]


class DocumentCreate(BaseModel):
    """Схема для создания документа"""
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., max_length=1000000)  # 1MB max content
    summary: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip()

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v):
        return _clean_tags(v)


class DocumentUpdate(BaseModel):
    """Схема для частичного обновления документа.

    Отсутствующее поле не меняется; явный null для summary очищает описание,
    для tags - делает список пустым.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, max_length=1000000)
    summary: Optional[str] = None
    tags: Optional[List[str]] = None
    expected_version: Optional[int] = Field(None, ge=1)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if v is None or not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip()

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        if v is None:
            raise ValueError('Content cannot be null')
        return v

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v):
        return _clean_tags(v)

    def changes(self) -> Dict[str, Any]:
        """Только поля, переданные клиентом"""
        return self.model_dump(exclude_unset=True, exclude={"expected_version"})


class DocumentResponse(BaseModel):
    """Схема для ответа с данными документа"""
    id: uuid.UUID
    title: str
    content: str
    summary: Optional[str]
    tags: List[str]
    version: int
    author_id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DocumentWithUserResponse(DocumentResponse):
    """Документ с автором"""
    author: UserResponse

    @classmethod
    def from_entity(cls, item: DocumentWithUser, **extra) -> "DocumentWithUserResponse":
        return cls(
            **DocumentResponse.model_validate(item.document).model_dump(),
            author=UserResponse.model_validate(item.author),
            **extra
        )


class DocumentVersionResponse(BaseModel):
    """Схема для ответа с данными версии документа"""
    id: uuid.UUID
    document_id: uuid.UUID
    title: str
    content: str
    summary: Optional[str]
    tags: List[str]
    version: int
    author_id: uuid.UUID
    created_at: datetime
    change_description: Optional[str]

    model_config = ConfigDict(from_attributes=True)


class DocumentDetailsResponse(DocumentWithUserResponse):
    """Документ с автором и историей версий"""
    versions: List[DocumentVersionResponse]

    @classmethod
    def from_details(cls, details: DocumentDetails) -> "DocumentDetailsResponse":
        return cls.from_entity(
            DocumentWithUser(document=details.document, author=details.author),
            versions=[DocumentVersionResponse.model_validate(v) for v in details.versions]
        )


class ActivityResponse(BaseModel):
    """Запись журнала действий с пользователем и документом"""
    id: uuid.UUID
    type: str
    description: str
    document_id: Optional[uuid.UUID]
    created_at: datetime
    user: UserResponse
    document: Optional[DocumentResponse] = None

    @classmethod
    def from_entry(cls, entry: ActivityEntry) -> "ActivityResponse":
        activity = entry.activity
        return cls(
            id=activity.id,
            type=activity.type.value,
            description=activity.description,
            document_id=activity.document_id,
            created_at=activity.created_at,
            user=UserResponse.model_validate(entry.user),
            document=DocumentResponse.model_validate(entry.document) if entry.document else None
        )
