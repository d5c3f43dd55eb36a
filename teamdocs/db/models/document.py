from sqlalchemy import Column, String, Text, Integer, ForeignKey, UUID, DateTime, JSON, Index

from teamdocs.core.clock import utcnow
from teamdocs.db.base import BaseModel


class Document(BaseModel):
    __tablename__ = "documents"

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    summary = Column(Text, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    version = Column(Integer, nullable=False, default=1)
    author_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)


class DocumentVersion(BaseModel):
    __tablename__ = "document_versions"
    __table_args__ = (
        Index("ix_document_versions_document_id_version", "document_id", "version", unique=True),
    )

    # Каскад выполняет репозиторий, а не ON DELETE CASCADE
    document_id = Column(UUID(as_uuid=True), ForeignKey("documents.id"), nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    summary = Column(Text, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    version = Column(Integer, nullable=False)
    author_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    change_description = Column(Text, nullable=True)
