import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from collabdocs.core.clock import now_unix
from collabdocs.core.db import unit_of_work
from collabdocs.core.errors import (
    CannotRemoveOwner, CapacityReached, DocNotFound, JoinMessageTooLong, JoinRequestNotFound,
    NotDocEditor, NotDocOwner, NotPending,
)
from collabdocs.db.repositories.document_repository import DocumentRepository
from collabdocs.db.repositories.join_request_repository import JoinRequestRepository
from collabdocs.db.repositories.membership_repository import MembershipRepository
from collabdocs.domains.documents.entities import Document
from collabdocs.domains.membership.entities import (
    MAX_JOIN_MESSAGE_CHARS, MAX_MEMBERS, JoinRequest, JoinRequestResult, JoinRequestStatus, Member, Role,
    can_transition,
)

logger = logging.getLogger(__name__)


def normalize_join_message(message: Optional[str]) -> Optional[str]:
    """Trim; blank means "no message"."""
    if message is None:
        return None
    cleaned = message.strip()
    if not cleaned:
        return None
    if len(cleaned) > MAX_JOIN_MESSAGE_CHARS:
        raise JoinMessageTooLong()
    return cleaned


class AccessGate:
    """Owner/editor predicates. A missing document is an error, never ``False``."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.document_repository = DocumentRepository(session)
        self.membership_repository = MembershipRepository(session)

    async def _owner_id(self, doc_id: int) -> int:
        owner_id = await self.document_repository.get_owner_id(doc_id)
        if owner_id is None:
            raise DocNotFound()
        return owner_id

    async def is_owner(self, doc_id: int, user_id: int) -> bool:
        return await self._owner_id(doc_id) == user_id

    async def is_editor(self, doc_id: int, user_id: int) -> bool:
        """Owner implies editor."""
        if await self._owner_id(doc_id) == user_id:
            return True
        return await self.membership_repository.is_editor_row(doc_id, user_id)

    async def require_owner(self, doc_id: int, user_id: int) -> None:
        if not await self.is_owner(doc_id, user_id):
            raise NotDocOwner()

    async def require_editor(self, doc_id: int, user_id: int) -> None:
        if not await self.is_editor(doc_id, user_id):
            raise NotDocEditor()


class MembershipService:
    """Member counts, listing and removal. The owner is never stored as a row."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.document_repository = DocumentRepository(session)
        self.membership_repository = MembershipRepository(session)
        self.gate = AccessGate(session)

    async def member_count(self, doc_id: int) -> int:
        return await self.membership_repository.member_count(doc_id)

    async def has_capacity(self, doc_id: int, max_members: int = MAX_MEMBERS) -> bool:
        return await self.membership_repository.has_capacity(doc_id, max_members)

    async def add_editor(self, doc_id: int, user_id: int) -> int:
        """
        Direct, idempotent grant, capacity-checked in the same transaction.

        Re-adding an editor, or adding the owner, is a no-op returning 0.
        Join requests go through ``JoinRequestService.approve`` instead.
        """
        async with unit_of_work(self.session):
            owner_id = await self.document_repository.get_owner_id(doc_id)
            if owner_id is None:
                raise DocNotFound()
            if owner_id == user_id or await self.membership_repository.is_editor_row(doc_id, user_id):
                return 0
            if not await self.membership_repository.has_capacity(doc_id):
                raise CapacityReached()

            added = await self.membership_repository.add_editor(doc_id, user_id, now_unix())
        if added:
            logger.info(f"User {user_id} added as editor of document {doc_id}")
        return added

    async def list_members(self, doc_id: int, caller_id: int) -> List[Member]:
        """Owner first, then editors by ``added_at``."""
        document = await self._get_document(doc_id)
        if not document.is_owner(caller_id):
            raise NotDocOwner()

        owner = Member(user_id=document.owner_id, role=Role.OWNER, added_at=document.created_at)
        editors = await self.membership_repository.list_editors(doc_id)
        return [owner] + editors

    async def remove_member(self, doc_id: int, member_user_id: int, caller_id: int) -> int:
        document = await self._get_document(doc_id)
        # The owner is never removable, whoever asks
        if document.is_owner(member_user_id):
            raise CannotRemoveOwner()
        if not document.is_owner(caller_id):
            raise NotDocOwner()

        async with unit_of_work(self.session):
            removed = await self.membership_repository.remove_editor(doc_id, member_user_id)

        if removed:
            logger.info(f"User {member_user_id} removed from document {doc_id}")
        return removed

    async def _get_document(self, doc_id: int) -> Document:
        document = await self.document_repository.get_by_id(doc_id)
        if document is None:
            raise DocNotFound()
        return document


class JoinRequestService:
    """
    Join-request workflow.

    Pending -> Approved and Pending -> Denied are the only transitions.
    Capacity is checked when a request is approved, not when it is filed.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.document_repository = DocumentRepository(session)
        self.membership_repository = MembershipRepository(session)
        self.join_request_repository = JoinRequestRepository(session)
        self.gate = AccessGate(session)

    async def create_or_update(self, doc_id: int, user_id: int, message: Optional[str] = None) -> JoinRequestResult:
        message = normalize_join_message(message)

        # Raises DocNotFound for unknown documents
        if await self.gate.is_editor(doc_id, user_id):
            return JoinRequestResult(request_id=0, already_member=True)

        async with unit_of_work(self.session):
            request_id = await self.join_request_repository.upsert_pending(doc_id, user_id, message, now_unix())

        logger.info(f"Join request {request_id} filed by user {user_id} for document {doc_id}")
        return JoinRequestResult(request_id=request_id)

    async def list_requests(self, doc_id: int, caller_id: int) -> List[JoinRequest]:
        await self.gate.require_owner(doc_id, caller_id)
        return await self.join_request_repository.list_for_doc(doc_id)

    async def approve(self, req_id: int, approver_id: int) -> None:
        """
        Grant the requester an editor seat.

        Runs as one transaction: load request, check pending, check owner,
        check capacity, add editor, mark approved. The document and request
        rows are locked first (FOR UPDATE on PostgreSQL; SQLite holds the
        database write lock from BEGIN IMMEDIATE), so concurrent approvals
        on one document see each other's inserts when counting.
        """
        now = now_unix()
        async with unit_of_work(self.session):
            request = await self.join_request_repository.get_by_id(req_id, for_update=True)
            if request is None:
                raise JoinRequestNotFound()
            if not can_transition(request.status, JoinRequestStatus.APPROVED):
                logger.warning(f"Approve of join request {req_id} rejected: status is {request.status.name}")
                raise NotPending()

            document = await self.document_repository.get_by_id(request.doc_id, for_update=True)
            if document is None:
                raise DocNotFound()
            if not document.is_owner(approver_id):
                logger.warning(f"Approve of join request {req_id} rejected: user {approver_id} is not the owner")
                raise NotDocOwner()

            if not await self.membership_repository.has_capacity(document.id):
                logger.warning(f"Approve of join request {req_id} rejected: document {document.id} is full")
                raise CapacityReached()

            await self.membership_repository.add_editor(document.id, request.user_id, now)

            updated = await self.join_request_repository.mark_approved(req_id, approver_id, now)
            if updated == 0:
                # Someone else decided it between our read and write
                logger.warning(f"Approve of join request {req_id} lost a race")
                raise NotPending()

        logger.info(f"Join request {req_id} approved: user {request.user_id} joined document {document.id}")

    async def deny(self, req_id: int, owner_id: int) -> int:
        """Returns 0 when the request is not pending or not on a document ``owner_id`` owns."""
        async with unit_of_work(self.session):
            updated = await self.join_request_repository.mark_denied(req_id, owner_id, now_unix())

        if updated:
            logger.info(f"Join request {req_id} denied by user {owner_id}")
        return updated
