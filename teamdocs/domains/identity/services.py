from typing import Optional, Tuple, TYPE_CHECKING
import logging
import uuid

from teamdocs.core.config import Settings
from teamdocs.core.security import create_access_token, verify_token
from teamdocs.domains.identity.entities import User, ROLE_ADMIN, ROLE_USER
from teamdocs.domains.identity.schemas import UserCreate, UserLogin, UserUpdate

if TYPE_CHECKING:
    from teamdocs.db.repositories.base import UserRepository

logger = logging.getLogger(__name__)


class IdentityService:
    """Сервис для работы с идентификацией и аутентификацией пользователей"""

    def __init__(self, user_repository: "UserRepository", settings: Settings):
        self.user_repository = user_repository
        self.settings = settings

    async def register_user(self, user_data: UserCreate) -> Tuple[str, User]:
        """Регистрация нового пользователя"""
        if await self.user_repository.email_exists(user_data.email):
            raise ValueError("User already exists")

        admins = {email.lower() for email in self.settings.admin_emails}
        role = ROLE_ADMIN if user_data.email.lower() in admins else ROLE_USER
        user = User.create_user(
            email=user_data.email,
            password=user_data.password,
            name=user_data.name,
            role=role
        )

        created = await self.user_repository.create(user)
        logger.info(f"User {created.id} registered with role {created.role}")
        return self.issue_token(created), created

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """Аутентификация пользователя"""
        user = await self.user_repository.get_by_email(email)

        if not user or not user.authenticate(password):
            return None

        return user

    async def login_user(self, login_data: UserLogin) -> Optional[Tuple[str, User]]:
        """Вход пользователя и создание JWT токена"""
        user = await self.authenticate_user(login_data.email, login_data.password)

        if not user:
            logger.warning(f"Failed login attempt for {login_data.email}")
            return None

        return self.issue_token(user), user

    def issue_token(self, user: User) -> str:
        token_data = {
            "sub": str(user.id),
            "email": user.email,
            "name": user.name,
            "role": user.role
        }
        return create_access_token(token_data, self.settings)

    async def get_user(self, user_id: uuid.UUID) -> Optional[User]:
        """Получение пользователя по id"""
        return await self.user_repository.get(user_id)

    async def update_user_profile(self, user_id: uuid.UUID, update_data: UserUpdate) -> Optional[User]:
        """Обновление профиля пользователя"""
        user = await self.user_repository.get(user_id)

        if not user:
            return None

        user.update_profile(name=update_data.name)
        return await self.user_repository.update(user)

    async def get_current_user_from_token(self, token: str) -> Optional[User]:
        """Получение текущего пользователя из JWT токена"""
        payload = verify_token(token, self.settings)
        if not payload or "sub" not in payload:
            return None

        try:
            user_id = uuid.UUID(payload["sub"])
        except (TypeError, ValueError):
            return None

        return await self.user_repository.get(user_id)
