from sqlalchemy import Column, String, DateTime

from teamdocs.core.clock import utcnow
from teamdocs.db.base import BaseModel


class User(BaseModel):
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user")
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
