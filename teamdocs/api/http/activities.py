from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from teamdocs.api.deps import get_current_user, get_document_service, get_settings
from teamdocs.core.config import Settings
from teamdocs.domains.documents.schemas import ActivityResponse
from teamdocs.domains.documents.services import DocumentService
from teamdocs.domains.identity.entities import User

router = APIRouter(prefix="/activities", tags=["activities"])


@router.get("", response_model=List[ActivityResponse])
async def recent_activities(
    limit: Optional[int] = Query(None, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service),
    settings: Settings = Depends(get_settings)
):
    """Последние действия пользователей"""
    entries = await document_service.recent_activities(limit or settings.recent_activity_limit)
    return [ActivityResponse.from_entry(entry) for entry in entries]
