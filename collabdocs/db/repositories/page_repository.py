from typing import List, Optional

from sqlalchemy import insert, select

from collabdocs.db.models.document import DocumentPage as PageModel
from collabdocs.db.repositories.base import BaseRepository
from collabdocs.domains.documents.entities import DocumentPage, PageMeta, PageStyle


class PageRepository(BaseRepository):
    """Per-document page slots holding the latest merged update blob."""

    async def create_initial_pages(self, doc_id: int, page_count: int, now: int) -> None:
        """Seed empty Body pages 0..page_count-1."""
        rows = [
            {
                "doc_id": doc_id,
                "page_index": idx,
                "style": int(PageStyle.BODY),
                "y_update": b"",
                "created_at": now,
                "updated_at": now,
            }
            for idx in range(page_count)
        ]
        await self.session.execute(insert(PageModel), rows)

    async def list_page_meta(self, doc_id: int) -> List[PageMeta]:
        result = await self.session.execute(
            select(PageModel.page_index, PageModel.style, PageModel.updated_at)
            .where(PageModel.doc_id == doc_id)
            .order_by(PageModel.page_index.asc())
        )
        return [
            PageMeta(page_index=row.page_index, style=row.style, updated_at=row.updated_at)
            for row in result.all()
        ]

    async def get_page(self, doc_id: int, page_index: int) -> Optional[DocumentPage]:
        result = await self.session.execute(
            select(PageModel)
            .where(PageModel.doc_id == doc_id, PageModel.page_index == page_index)
            .execution_options(populate_existing=True)
        )
        db_page = result.scalar_one_or_none()
        return self._to_domain(db_page) if db_page else None

    async def upsert_page(self, doc_id: int, page_index: int, style: int, y_update: bytes, now: int) -> int:
        """Insert or replace the page's style and blob (last writer wins)."""
        stmt = self.upsert_insert(PageModel).values(
            doc_id=doc_id,
            page_index=page_index,
            style=style,
            y_update=y_update,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[PageModel.doc_id, PageModel.page_index],
            set_={
                "style": stmt.excluded.style,
                "y_update": stmt.excluded.y_update,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    def _to_domain(self, db_page: PageModel) -> DocumentPage:
        return DocumentPage(
            doc_id=db_page.doc_id,
            page_index=db_page.page_index,
            style=db_page.style,
            y_update=bytes(db_page.y_update or b""),
            created_at=db_page.created_at,
            updated_at=db_page.updated_at,
        )
