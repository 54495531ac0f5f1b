from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from collabdocs.core.auth import get_current_user_id
from collabdocs.core.db import get_db
from collabdocs.domains.membership.schemas import MemberListResponse, MemberRemoveResponse, MemberResponse
from collabdocs.domains.membership.services import MembershipService

router = APIRouter(prefix="/api/docs", tags=["members"])


@router.get("/{doc_id}/members", response_model=MemberListResponse)
async def list_members(
    doc_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Owner first, then editors (owner only)."""
    membership_service = MembershipService(db)
    members = await membership_service.list_members(doc_id, user_id)
    return MemberListResponse(
        items=[MemberResponse(user_id=m.user_id, role=int(m.role), added_at=m.added_at) for m in members]
    )


@router.delete("/{doc_id}/members/{member_user_id}", response_model=MemberRemoveResponse)
async def remove_member(
    doc_id: int,
    member_user_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    membership_service = MembershipService(db)
    removed = await membership_service.remove_member(doc_id, member_user_id, user_id)
    return MemberRemoveResponse(removed=removed)
