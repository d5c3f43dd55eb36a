from teamdocs.domains.identity.entities import User, ROLE_ADMIN, ROLE_USER
from teamdocs.domains.identity.schemas import (
    UserCreate, UserLogin, UserUpdate, UserResponse, AuthResponse
)
from teamdocs.domains.identity.services import IdentityService

__all__ = [
    "User", "ROLE_ADMIN", "ROLE_USER",
    "UserCreate", "UserLogin", "UserUpdate", "UserResponse", "AuthResponse",
    "IdentityService"
]
