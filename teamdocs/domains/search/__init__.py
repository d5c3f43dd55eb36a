from teamdocs.domains.search.schemas import SearchMode, SearchResultResponse
from teamdocs.domains.search.services import SearchHit, SearchService

__all__ = ["SearchMode", "SearchResultResponse", "SearchHit", "SearchService"]
