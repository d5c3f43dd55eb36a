import uuid
from datetime import datetime
from typing import Optional

from teamdocs.core.clock import utcnow
from teamdocs.core.security import get_password_hash, verify_password

ROLE_USER = "user"
ROLE_ADMIN = "admin"


class User:
    """Сущность пользователя домена Identity"""

    def __init__(
        self,
        id: uuid.UUID,
        email: str,
        password_hash: str,
        name: str,
        role: str = ROLE_USER,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.email = email
        self.password_hash = password_hash
        self.name = name
        self.role = role
        self.created_at = created_at or utcnow()
        self.updated_at = updated_at or self.created_at

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def authenticate(self, password: str) -> bool:
        """Проверка пароля пользователя"""
        return verify_password(password, self.password_hash)

    def update_profile(self, name: Optional[str] = None) -> None:
        """Обновление профиля пользователя"""
        if name:
            self.name = name
        self.updated_at = utcnow()

    def can_modify(self, author_id: uuid.UUID) -> bool:
        """Автор документа или администратор"""
        return self.is_admin or self.id == author_id

    @classmethod
    def create_user(cls, email: str, password: str, name: str, role: str = ROLE_USER) -> "User":
        """Создание нового пользователя с хешированием пароля"""
        return cls(
            id=uuid.uuid4(),
            email=email,
            password_hash=get_password_hash(password),
            name=name,
            role=role
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.role})"
