from typing import List, Optional

from sqlalchemy import case, exists, func, or_, select, update

from collabdocs.db.models.document import Document as DocumentModel
from collabdocs.db.models.membership import DocumentCollaborator as CollaboratorModel
from collabdocs.db.repositories.base import BaseRepository
from collabdocs.domains.documents.entities import Document


class DocumentRepository(BaseRepository):
    """Document rows: creation, lookup, membership listing and activity bumps."""

    async def create(self, document: Document) -> Document:
        db_document = DocumentModel(
            owner_id=document.owner_id,
            title=document.title,
            page_count=document.page_count,
            created_at=document.created_at,
            updated_at=document.updated_at,
        )
        self.session.add(db_document)
        await self.session.flush()
        return self._to_domain(db_document)

    async def get_by_id(self, doc_id: int, for_update: bool = False) -> Optional[Document]:
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.id == doc_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        db_document = result.scalar_one_or_none()
        return self._to_domain(db_document) if db_document else None

    async def get_owner_id(self, doc_id: int) -> Optional[int]:
        result = await self.session.execute(
            select(DocumentModel.owner_id).where(DocumentModel.id == doc_id)
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: int, limit: int, offset: int) -> List[Document]:
        """Documents the user owns or edits, most recently active first."""
        result = await self.session.execute(
            select(DocumentModel)
            .where(self._member_clause(user_id))
            .order_by(DocumentModel.updated_at.desc(), DocumentModel.id.desc())
            .offset(offset)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return [self._to_domain(doc) for doc in result.scalars().all()]

    async def count_for_user(self, user_id: int) -> int:
        result = await self.session.execute(
            select(func.count(DocumentModel.id)).where(self._member_clause(user_id))
        )
        return result.scalar() or 0

    async def touch(self, doc_id: int, now: int) -> int:
        """Set updated_at = now (clamped so it never precedes created_at)."""
        stmt = (
            update(DocumentModel)
            .where(DocumentModel.id == doc_id)
            .values(
                updated_at=case(
                    (DocumentModel.created_at > now, DocumentModel.created_at),
                    else_=now,
                )
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    def _member_clause(self, user_id: int):
        is_editor = exists().where(
            CollaboratorModel.doc_id == DocumentModel.id,
            CollaboratorModel.user_id == user_id,
        )
        return or_(DocumentModel.owner_id == user_id, is_editor)

    def _to_domain(self, db_document: DocumentModel) -> Document:
        return Document(
            id=db_document.id,
            owner_id=db_document.owner_id,
            title=db_document.title,
            page_count=db_document.page_count,
            created_at=db_document.created_at,
            updated_at=db_document.updated_at,
        )
