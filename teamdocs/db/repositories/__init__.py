from teamdocs.db.repositories.base import UserRepository, DocumentRepository
from teamdocs.db.repositories.memory import MemoryStore, MemoryUserRepository, MemoryDocumentRepository
from teamdocs.db.repositories.user_repository import SqlUserRepository
from teamdocs.db.repositories.document_repository import SqlDocumentRepository

__all__ = [
    "UserRepository",
    "DocumentRepository",
    "MemoryStore",
    "MemoryUserRepository",
    "MemoryDocumentRepository",
    "SqlUserRepository",
    "SqlDocumentRepository"
]
