from teamdocs.db.base import Base
from teamdocs.db.models.user import User
from teamdocs.db.models.document import Document, DocumentVersion
from teamdocs.db.models.activity import Activity

__all__ = [
    "Base",
    "User",
    "Document",
    "DocumentVersion",
    "Activity",
]
