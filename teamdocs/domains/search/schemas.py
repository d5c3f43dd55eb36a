import enum
from typing import Optional

from pydantic import Field

from teamdocs.domains.documents.schemas import DocumentWithUserResponse


class SearchMode(str, enum.Enum):
    TEXT = "text"
    SEMANTIC = "semantic"


class SearchResultResponse(DocumentWithUserResponse):
    """Документ в результатах поиска; relevance есть только у смыслового поиска"""
    relevance: Optional[int] = Field(None, ge=0, le=100)
