from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
import uuid

from teamdocs.api.deps import get_current_user, get_document_service
from teamdocs.core.errors import PermissionDeniedError, VersionConflictError
from teamdocs.domains.documents.schemas import (
    DocumentCreate, DocumentUpdate, DocumentResponse, DocumentWithUserResponse,
    DocumentDetailsResponse, DocumentVersionResponse
)
from teamdocs.domains.documents.services import DocumentService
from teamdocs.domains.identity.entities import User

router = APIRouter(prefix="/documents", tags=["documents"])


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Document not found"
    )


@router.get("", response_model=List[DocumentWithUserResponse])
async def list_documents(
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Получение списка документов (последние измененные первыми)"""
    documents = await document_service.list_documents()
    return [DocumentWithUserResponse.from_entity(item) for item in documents]


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: DocumentCreate,
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Создание нового документа"""
    document = await document_service.create_document(document_data, current_user)
    return DocumentResponse.model_validate(document)


@router.get("/{document_id}", response_model=DocumentDetailsResponse)
async def get_document(
    document_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Получение документа с автором и версиями"""
    details = await document_service.get_document(document_id)

    if not details:
        raise _not_found()

    return DocumentDetailsResponse.from_details(details)


@router.put("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: uuid.UUID,
    update_data: DocumentUpdate,
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Обновление документа"""
    try:
        document = await document_service.update_document(document_id, update_data, current_user)
    except PermissionDeniedError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )
    except VersionConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )

    if not document:
        raise _not_found()

    return DocumentResponse.model_validate(document)


@router.delete("/{document_id}")
async def delete_document(
    document_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Удаление документа вместе с историей"""
    try:
        deleted = await document_service.delete_document(document_id, current_user)
    except PermissionDeniedError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )

    if not deleted:
        raise _not_found()

    return {"message": "Document deleted successfully"}


@router.get("/{document_id}/versions", response_model=List[DocumentVersionResponse])
async def get_document_versions(
    document_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Получение версий документа"""
    versions = await document_service.get_document_versions(document_id)
    return [DocumentVersionResponse.model_validate(v) for v in versions]
