import base64
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DocumentCreate(BaseModel):
    """Create-document request body"""
    # Title and page_count bounds are enforced by the service with domain error codes
    title: str
    page_count: int = 1


class DocumentCreated(BaseModel):
    id: int


class DocumentResponse(BaseModel):
    """Document metadata without pages"""
    id: int
    owner_id: int
    title: str
    page_count: int
    created_at: int
    updated_at: int

    model_config = ConfigDict(from_attributes=True)


class DocumentListResponse(BaseModel):
    """One page of the caller's documents"""
    items: List[DocumentResponse]
    page: int
    total_pages: int
    total: int


class PageMetaResponse(BaseModel):
    page_index: int
    style: int
    updated_at: int

    model_config = ConfigDict(from_attributes=True)


class DocumentMetaResponse(DocumentResponse):
    pages: List[PageMetaResponse] = Field(default_factory=list)


class PageResponse(BaseModel):
    doc_id: int
    page_index: int
    style: int
    y_update_base64: str

    @classmethod
    def from_payload(cls, payload) -> "PageResponse":
        return cls(
            doc_id=payload.doc_id,
            page_index=payload.page_index,
            style=payload.style,
            y_update_base64=base64.b64encode(payload.y_update).decode("ascii"),
        )


class PageUpsertRequest(BaseModel):
    """Page save body; the update blob travels as base64. A missing or null style means Body."""
    style: Optional[int] = None
    y_update_base64: str


class PageUpsertResponse(BaseModel):
    updated: int
    updated_at: int
