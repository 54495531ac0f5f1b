from collabdocs.domains.membership.entities import (
    MAX_MEMBERS, JoinRequest, JoinRequestResult, JoinRequestStatus, Member, Role
)
from collabdocs.domains.membership.schemas import (
    MemberResponse, MemberListResponse, MemberRemoveResponse, JoinRequestCreate, JoinRequestCreated,
    JoinRequestResponse, JoinRequestListResponse, ApproveResponse, DenyResponse
)

__all__ = [
    "MAX_MEMBERS", "JoinRequest", "JoinRequestResult", "JoinRequestStatus", "Member", "Role",
    "MemberResponse", "MemberListResponse", "MemberRemoveResponse", "JoinRequestCreate", "JoinRequestCreated",
    "JoinRequestResponse", "JoinRequestListResponse", "ApproveResponse", "DenyResponse"
]
