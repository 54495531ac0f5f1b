from collabdocs.domains.documents.entities import (
    Document, DocumentListPage, DocumentMeta, DocumentPage, PageMeta, PagePayload, PageStyle
)
from collabdocs.domains.documents.schemas import (
    DocumentCreate, DocumentCreated, DocumentResponse, DocumentListResponse, DocumentMetaResponse,
    PageMetaResponse, PageResponse, PageUpsertRequest, PageUpsertResponse
)

__all__ = [
    "Document", "DocumentListPage", "DocumentMeta", "DocumentPage", "PageMeta", "PagePayload", "PageStyle",
    "DocumentCreate", "DocumentCreated", "DocumentResponse", "DocumentListResponse", "DocumentMetaResponse",
    "PageMetaResponse", "PageResponse", "PageUpsertRequest", "PageUpsertResponse"
]
