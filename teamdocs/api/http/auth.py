from fastapi import APIRouter, Depends, HTTPException, status

from teamdocs.api.deps import get_current_user, get_identity_service
from teamdocs.domains.identity.entities import User
from teamdocs.domains.identity.schemas import (
    UserCreate, UserLogin, UserResponse, UserUpdate, AuthResponse
)
from teamdocs.domains.identity.services import IdentityService

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Регистрация нового пользователя"""
    try:
        token, user = await identity_service.register_user(user_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: UserLogin,
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Вход пользователя"""
    result = await identity_service.login_user(login_data)

    if not result:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token, user = result
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Получение информации о текущем пользователе"""
    return UserResponse.model_validate(current_user)


@router.put("/me", response_model=UserResponse)
async def update_current_user(
    update_data: UserUpdate,
    current_user: User = Depends(get_current_user),
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Обновление профиля текущего пользователя"""
    user = await identity_service.update_user_profile(current_user.id, update_data)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return UserResponse.model_validate(user)
