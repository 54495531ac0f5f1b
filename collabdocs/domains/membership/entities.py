from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

# Owner + editors, per document
MAX_MEMBERS = 10
MAX_JOIN_MESSAGE_CHARS = 500


class Role(IntEnum):
    EDITOR = 2
    OWNER = 3


class JoinRequestStatus(IntEnum):
    PENDING = 0
    APPROVED = 1
    DENIED = 2


# Pending -> Approved | Denied; terminal states have no way out
ALLOWED_TRANSITIONS = {
    JoinRequestStatus.PENDING: {JoinRequestStatus.APPROVED, JoinRequestStatus.DENIED},
    JoinRequestStatus.APPROVED: set(),
    JoinRequestStatus.DENIED: set(),
}


def can_transition(current: JoinRequestStatus, new: JoinRequestStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


@dataclass
class Member:
    user_id: int
    role: Role
    added_at: int


@dataclass
class JoinRequest:
    id: int
    doc_id: int
    user_id: int
    status: JoinRequestStatus
    message: Optional[str]
    created_at: int
    decided_at: Optional[int] = None
    decided_by: Optional[int] = None

    @property
    def is_pending(self) -> bool:
        return self.status is JoinRequestStatus.PENDING


@dataclass
class JoinRequestResult:
    """Outcome of a create-or-update call. ``request_id`` is 0 for existing members."""

    request_id: int
    already_member: bool = False
