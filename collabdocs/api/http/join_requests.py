from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from collabdocs.core.auth import get_current_user_id
from collabdocs.core.db import get_db
from collabdocs.domains.membership.schemas import (
    ApproveResponse, DenyResponse, JoinRequestCreate, JoinRequestCreated, JoinRequestListResponse,
    JoinRequestResponse,
)
from collabdocs.domains.membership.services import JoinRequestService

router = APIRouter(prefix="/api/docs", tags=["join-requests"])


@router.post("/{doc_id}/join_requests", response_model=JoinRequestCreated)
async def request_to_join(
    doc_id: int,
    request_data: JoinRequestCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """File (or refresh) a request to become an editor. Members get ``already_member``."""
    join_request_service = JoinRequestService(db)
    result = await join_request_service.create_or_update(doc_id, user_id, request_data.message)
    return JoinRequestCreated.model_validate(result)


@router.get("/{doc_id}/join_requests", response_model=JoinRequestListResponse)
async def list_join_requests(
    doc_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    join_request_service = JoinRequestService(db)
    requests = await join_request_service.list_requests(doc_id, user_id)
    return JoinRequestListResponse(items=[JoinRequestResponse.from_entity(r) for r in requests])


@router.post("/requests/{req_id}/approve", response_model=ApproveResponse)
async def approve_join_request(
    req_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    join_request_service = JoinRequestService(db)
    await join_request_service.approve(req_id, user_id)
    return ApproveResponse(ok=True)


@router.post("/requests/{req_id}/deny", response_model=DenyResponse)
async def deny_join_request(
    req_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """``updated`` is 0 when the request is not pending or the caller is not the owner."""
    join_request_service = JoinRequestService(db)
    updated = await join_request_service.deny(req_id, user_id)
    return DenyResponse(updated=updated)
