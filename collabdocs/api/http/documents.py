from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from collabdocs.core.auth import get_current_user_id
from collabdocs.core.db import get_db
from collabdocs.domains.documents.schemas import (
    DocumentCreate, DocumentCreated, DocumentListResponse, DocumentMetaResponse, DocumentResponse,
    PageMetaResponse,
)
from collabdocs.domains.documents.services import DocumentService

router = APIRouter(prefix="/api/docs", tags=["documents"])


@router.post("", response_model=DocumentCreated, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: DocumentCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Create a document owned by the caller, with empty pages."""
    document_service = DocumentService(db)
    document = await document_service.create_document(user_id, document_data.title, document_data.page_count)
    return DocumentCreated(id=document.id)


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Documents the caller owns or edits, most recently active first."""
    document_service = DocumentService(db)
    result = await document_service.list_for_user(user_id, page=page, limit=limit)

    return DocumentListResponse(
        items=[DocumentResponse.model_validate(doc) for doc in result.items],
        page=result.page,
        total_pages=result.total_pages,
        total=result.total,
    )


@router.get("/{doc_id}", response_model=DocumentMetaResponse)
async def get_document(
    doc_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    document_service = DocumentService(db)
    meta = await document_service.get_meta(doc_id, user_id)

    return DocumentMetaResponse(
        id=meta.id,
        owner_id=meta.owner_id,
        title=meta.title,
        page_count=meta.page_count,
        created_at=meta.created_at,
        updated_at=meta.updated_at,
        pages=[PageMetaResponse.model_validate(p) for p in meta.pages],
    )
