from typing import AsyncIterator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from teamdocs.core.config import Settings
from teamdocs.db.backends import Repositories
from teamdocs.domains.assistant.services import AssistantService
from teamdocs.domains.documents.services import DocumentService
from teamdocs.domains.identity.entities import User
from teamdocs.domains.identity.services import IdentityService
from teamdocs.domains.search.services import SearchService

security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_repositories(request: Request) -> AsyncIterator[Repositories]:
    """Репозитории на время запроса"""
    async with request.app.state.backend.open() as repositories:
        yield repositories


def get_identity_service(
    repositories: Repositories = Depends(get_repositories),
    settings: Settings = Depends(get_settings)
) -> IdentityService:
    return IdentityService(repositories.users, settings)


def get_document_service(repositories: Repositories = Depends(get_repositories)) -> DocumentService:
    return DocumentService(repositories.documents)


def get_assistant_service(
    request: Request,
    settings: Settings = Depends(get_settings)
) -> AssistantService:
    return AssistantService(request.app.state.generator, settings)


def get_search_service(
    repositories: Repositories = Depends(get_repositories),
    assistant: AssistantService = Depends(get_assistant_service)
) -> SearchService:
    return SearchService(repositories.documents, assistant)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    identity_service: IdentityService = Depends(get_identity_service)
) -> User:
    """Зависимость для получения текущего пользователя"""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await identity_service.get_current_user_from_token(credentials.credentials)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user
