from typing import List, Optional

from sqlalchemy import case, func, select, update

from collabdocs.db.models.document import Document as DocumentModel
from collabdocs.db.models.membership import DocumentJoinRequest as JoinRequestModel
from collabdocs.db.repositories.base import BaseRepository
from collabdocs.domains.membership.entities import JoinRequest, JoinRequestStatus


class JoinRequestRepository(BaseRepository):
    """One join request per (doc, user); state changes are guarded by status."""

    async def upsert_pending(self, doc_id: int, user_id: int, message: Optional[str], now: int) -> int:
        """
        Create the request, or refresh the message of the existing one.

        A None message keeps whatever was stored before. Status is never
        touched here, so decided requests stay decided.
        """
        stmt = self.upsert_insert(JoinRequestModel).values(
            doc_id=doc_id,
            user_id=user_id,
            status=int(JoinRequestStatus.PENDING),
            message=message,
            created_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[JoinRequestModel.doc_id, JoinRequestModel.user_id],
            set_={"message": func.coalesce(stmt.excluded.message, JoinRequestModel.message)},
        )
        await self.session.execute(stmt)

        result = await self.session.execute(
            select(JoinRequestModel.id).where(
                JoinRequestModel.doc_id == doc_id,
                JoinRequestModel.user_id == user_id,
            )
        )
        return result.scalar_one()

    async def get_by_id(self, req_id: int, for_update: bool = False) -> Optional[JoinRequest]:
        stmt = (
            select(JoinRequestModel)
            .where(JoinRequestModel.id == req_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        db_request = result.scalar_one_or_none()
        return self._to_domain(db_request) if db_request else None

    async def list_for_doc(self, doc_id: int) -> List[JoinRequest]:
        """Pending first, then most recent."""
        pending_first = case((JoinRequestModel.status == int(JoinRequestStatus.PENDING), 0), else_=1)
        result = await self.session.execute(
            select(JoinRequestModel)
            .where(JoinRequestModel.doc_id == doc_id)
            .order_by(pending_first, JoinRequestModel.created_at.desc(), JoinRequestModel.id.desc())
            .execution_options(populate_existing=True)
        )
        return [self._to_domain(req) for req in result.scalars().all()]

    async def mark_approved(self, req_id: int, decided_by: int, now: int) -> int:
        """Pending -> Approved. Returns 0 when the request already left Pending."""
        stmt = (
            update(JoinRequestModel)
            .where(
                JoinRequestModel.id == req_id,
                JoinRequestModel.status == int(JoinRequestStatus.PENDING),
            )
            .values(status=int(JoinRequestStatus.APPROVED), decided_at=now, decided_by=decided_by)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def mark_denied(self, req_id: int, owner_id: int, now: int) -> int:
        """Pending -> Denied, only on documents owned by ``owner_id``."""
        owned_docs = select(DocumentModel.id).where(DocumentModel.owner_id == owner_id)
        stmt = (
            update(JoinRequestModel)
            .where(
                JoinRequestModel.id == req_id,
                JoinRequestModel.status == int(JoinRequestStatus.PENDING),
                JoinRequestModel.doc_id.in_(owned_docs),
            )
            .values(status=int(JoinRequestStatus.DENIED), decided_at=now, decided_by=owner_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    def _to_domain(self, db_request: JoinRequestModel) -> JoinRequest:
        return JoinRequest(
            id=db_request.id,
            doc_id=db_request.doc_id,
            user_id=db_request.user_id,
            status=JoinRequestStatus(db_request.status),
            message=db_request.message,
            created_at=db_request.created_at,
            decided_at=db_request.decided_at,
            decided_by=db_request.decided_by,
        )
