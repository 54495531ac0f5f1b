from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class MemberResponse(BaseModel):
    """Document member. role: 3 = owner, 2 = editor"""
    user_id: int
    role: int
    added_at: int

    model_config = ConfigDict(from_attributes=True)


class MemberListResponse(BaseModel):
    items: List[MemberResponse]


class MemberRemoveResponse(BaseModel):
    removed: int


class JoinRequestCreate(BaseModel):
    """Join request body"""
    message: Optional[str] = None


class JoinRequestCreated(BaseModel):
    request_id: int
    already_member: bool = False

    model_config = ConfigDict(from_attributes=True)


class JoinRequestResponse(BaseModel):
    """status: 0 = pending, 1 = approved, 2 = denied"""
    id: int
    doc_id: int
    user_id: int
    status: int
    message: Optional[str] = None
    created_at: int
    decided_at: Optional[int] = None
    decided_by: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, request) -> "JoinRequestResponse":
        return cls(
            id=request.id,
            doc_id=request.doc_id,
            user_id=request.user_id,
            status=int(request.status),
            message=request.message,
            created_at=request.created_at,
            decided_at=request.decided_at,
            decided_by=request.decided_by,
        )


class JoinRequestListResponse(BaseModel):
    items: List[JoinRequestResponse]


class ApproveResponse(BaseModel):
    ok: bool = True


class DenyResponse(BaseModel):
    updated: int
