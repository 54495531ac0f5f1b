from typing import List

from sqlalchemy import delete, func, select

from collabdocs.db.models.document import Document as DocumentModel
from collabdocs.db.models.membership import DocumentCollaborator as CollaboratorModel
from collabdocs.db.repositories.base import BaseRepository
from collabdocs.domains.membership.entities import MAX_MEMBERS, Member, Role


class MembershipRepository(BaseRepository):
    """Editor rows. The owner is implicit (documents.owner_id) and never stored here."""

    async def is_owner(self, doc_id: int, user_id: int) -> bool:
        result = await self.session.execute(
            select(DocumentModel.id).where(DocumentModel.id == doc_id, DocumentModel.owner_id == user_id)
        )
        return result.scalar_one_or_none() is not None

    async def is_editor_row(self, doc_id: int, user_id: int) -> bool:
        result = await self.session.execute(
            select(CollaboratorModel.user_id).where(
                CollaboratorModel.doc_id == doc_id,
                CollaboratorModel.user_id == user_id,
                CollaboratorModel.role == int(Role.EDITOR),
            )
        )
        return result.scalar_one_or_none() is not None

    async def member_count(self, doc_id: int) -> int:
        """Owner plus editor rows."""
        result = await self.session.execute(
            select(func.count()).select_from(CollaboratorModel).where(
                CollaboratorModel.doc_id == doc_id,
                CollaboratorModel.role == int(Role.EDITOR),
            )
        )
        return 1 + (result.scalar() or 0)

    async def has_capacity(self, doc_id: int, max_members: int = MAX_MEMBERS) -> bool:
        return await self.member_count(doc_id) < max_members

    async def add_editor(self, doc_id: int, user_id: int, now: int) -> int:
        """Insert-or-ignore; re-adding an existing editor affects 0 rows."""
        stmt = (
            self.upsert_insert(CollaboratorModel)
            .values(doc_id=doc_id, user_id=user_id, role=int(Role.EDITOR), added_at=now)
            .on_conflict_do_nothing(index_elements=[CollaboratorModel.doc_id, CollaboratorModel.user_id])
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def remove_editor(self, doc_id: int, user_id: int) -> int:
        result = await self.session.execute(
            delete(CollaboratorModel).where(
                CollaboratorModel.doc_id == doc_id,
                CollaboratorModel.user_id == user_id,
            )
        )
        return result.rowcount

    async def list_editors(self, doc_id: int) -> List[Member]:
        result = await self.session.execute(
            select(CollaboratorModel.user_id, CollaboratorModel.added_at)
            .where(CollaboratorModel.doc_id == doc_id, CollaboratorModel.role == int(Role.EDITOR))
            .order_by(CollaboratorModel.added_at.asc(), CollaboratorModel.user_id.asc())
        )
        return [Member(user_id=row.user_id, role=Role.EDITOR, added_at=row.added_at) for row in result.all()]
