from teamdocs.domains.documents.entities import (
    ActivityType, Activity, ActivityEntry, Document, DocumentVersion, DocumentWithUser, DocumentDetails
)
from teamdocs.domains.documents.schemas import (
    DocumentCreate, DocumentUpdate, DocumentResponse, DocumentWithUserResponse,
    DocumentVersionResponse, DocumentDetailsResponse, ActivityResponse
)
from teamdocs.domains.documents.services import DocumentService

__all__ = [
    "ActivityType", "Activity", "ActivityEntry", "Document", "DocumentVersion",
    "DocumentWithUser", "DocumentDetails",
    "DocumentCreate", "DocumentUpdate", "DocumentResponse", "DocumentWithUserResponse",
    "DocumentVersionResponse", "DocumentDetailsResponse", "ActivityResponse",
    "DocumentService"
]
