from .document_repository import DocumentRepository
from .json_document_repository import JsonDocumentRepository

__all__ = ["DocumentRepository", "JsonDocumentRepository"]
