from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from collabdocs.core.auth import get_current_user_id
from collabdocs.core.db import get_db
from collabdocs.domains.documents.schemas import PageResponse, PageUpsertRequest, PageUpsertResponse
from collabdocs.domains.documents.services import PageService

router = APIRouter(prefix="/api/docs", tags=["pages"])


@router.get("/{doc_id}/pages/{page_index}", response_model=PageResponse)
async def open_page(
    doc_id: int,
    page_index: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Style and the latest merged update of one page (editors only)."""
    page_service = PageService(db)
    payload = await page_service.open_page(doc_id, page_index, user_id)
    return PageResponse.from_payload(payload)


@router.put("/{doc_id}/pages/{page_index}", response_model=PageUpsertResponse)
async def save_page(
    doc_id: int,
    page_index: int,
    page_data: PageUpsertRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Overwrite a page with the client's merged update (editors only)."""
    page_service = PageService(db)
    updated, updated_at = await page_service.upsert_encoded_page(
        doc_id,
        page_index,
        page_data.y_update_base64,
        user_id,
        style=page_data.style,
    )
    return PageUpsertResponse(updated=updated, updated_at=updated_at)
