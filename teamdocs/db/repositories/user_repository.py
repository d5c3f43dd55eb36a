from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
import uuid

from teamdocs.db.models.user import User as UserModel
from teamdocs.db.repositories.base import UserRepository
from teamdocs.domains.identity.entities import User


def user_to_domain(db_user: UserModel) -> User:
    """Преобразование модели БД в доменную сущность"""
    return User(
        id=db_user.id,
        email=db_user.email,
        password_hash=db_user.password_hash,
        name=db_user.name,
        role=db_user.role,
        created_at=db_user.created_at,
        updated_at=db_user.updated_at
    )


class SqlUserRepository(UserRepository):
    """Репозиторий для работы с пользователями"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: User) -> User:
        """Создание нового пользователя"""
        db_user = UserModel(
            id=user.id,
            email=user.email,
            password_hash=user.password_hash,
            name=user.name,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at
        )

        self.session.add(db_user)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("User already exists")
        await self.session.refresh(db_user)
        return user_to_domain(db_user)

    async def get(self, user_id: uuid.UUID) -> Optional[User]:
        """Получение пользователя по id"""
        db_user = await self.session.get(UserModel, user_id)
        return user_to_domain(db_user) if db_user else None

    async def get_by_email(self, email: str) -> Optional[User]:
        """Получение пользователя по email"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        db_user = result.scalar_one_or_none()
        return user_to_domain(db_user) if db_user else None

    async def update(self, user: User) -> Optional[User]:
        """Обновление профиля пользователя"""
        stmt = (
            update(UserModel)
            .where(UserModel.id == user.id)
            .values(
                name=user.name,
                updated_at=user.updated_at
            )
        )

        result = await self.session.execute(stmt)
        await self.session.commit()
        if result.rowcount == 0:
            return None

        db_user = await self.session.get(UserModel, user.id, populate_existing=True)
        return user_to_domain(db_user)

    async def email_exists(self, email: str) -> bool:
        """Проверка существования email"""
        result = await self.session.execute(
            select(UserModel.id).where(UserModel.email == email)
        )
        return result.scalar_one_or_none() is not None
