from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional

from teamdocs.api.deps import get_current_user, get_search_service
from teamdocs.domains.identity.entities import User
from teamdocs.domains.search.schemas import SearchMode, SearchResultResponse
from teamdocs.domains.search.services import SearchService

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=List[SearchResultResponse])
async def search_documents(
    q: Optional[str] = Query(None, max_length=500),
    type: SearchMode = Query(SearchMode.TEXT),
    current_user: User = Depends(get_current_user),
    search_service: SearchService = Depends(get_search_service)
):
    """Поиск документов по тексту или по смыслу"""
    if not q or not q.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Query parameter required"
        )

    hits = await search_service.search(q.strip(), type)
    return [SearchResultResponse.from_entity(hit.item, relevance=hit.relevance) for hit in hits]
