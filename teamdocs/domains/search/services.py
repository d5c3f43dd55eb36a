from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING
import logging

from teamdocs.core.errors import UpstreamError
from teamdocs.domains.assistant.services import AssistantService
from teamdocs.domains.documents.entities import DocumentWithUser
from teamdocs.domains.search.schemas import SearchMode

if TYPE_CHECKING:
    from teamdocs.db.repositories.base import DocumentRepository

logger = logging.getLogger(__name__)


@dataclass
class SearchHit:
    item: DocumentWithUser
    relevance: Optional[int] = None


class SearchService:
    """Поиск по тексту или по смыслу через AI с откатом на текстовый поиск"""

    def __init__(self, document_repository: "DocumentRepository", assistant: AssistantService):
        self.document_repository = document_repository
        self.assistant = assistant

    async def search(self, query: str, mode: SearchMode = SearchMode.TEXT) -> List[SearchHit]:
        if mode == SearchMode.SEMANTIC:
            return await self.semantic_search(query)
        return await self.text_search(query)

    async def text_search(self, query: str) -> List[SearchHit]:
        """Поиск подстроки без учета регистра"""
        return [SearchHit(item) for item in await self.document_repository.search(query)]

    async def semantic_search(self, query: str) -> List[SearchHit]:
        """Ранжирование всех документов моделью"""
        documents = await self.document_repository.list()
        try:
            ranked = await self.assistant.rank_by_semantic_relevance(query, documents)
        except UpstreamError as e:
            logger.warning(f"Semantic search failed, falling back to text search: {e}")
            return await self.text_search(query)
        return [SearchHit(item, relevance) for item, relevance in ranked]
