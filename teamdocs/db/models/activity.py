from sqlalchemy import Column, String, Text, ForeignKey, UUID

from teamdocs.db.base import BaseModel


class Activity(BaseModel):
    __tablename__ = "activities"

    type = Column(String(20), nullable=False)
    document_id = Column(UUID(as_uuid=True), ForeignKey("documents.id"), nullable=True, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    description = Column(Text, nullable=False)
