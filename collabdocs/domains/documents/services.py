import logging
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from collabdocs.core.clock import now_unix
from collabdocs.core.db import unit_of_work
from collabdocs.core.errors import DocNotFound, PageNotFound
from collabdocs.db.repositories.document_repository import DocumentRepository
from collabdocs.db.repositories.page_repository import PageRepository
from collabdocs.domains.documents.entities import Document, DocumentListPage, DocumentMeta, PagePayload, PageStyle
from collabdocs.domains.documents.validation import (
    decode_update_base64, normalize_pagination, validate_page_count, validate_page_index, validate_style,
    validate_title, validate_update_bytes,
)
from collabdocs.domains.membership.services import AccessGate

logger = logging.getLogger(__name__)


class DocumentService:
    """Document lifecycle: creation with seeded pages, metadata, listing."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.document_repository = DocumentRepository(session)
        self.page_repository = PageRepository(session)
        self.gate = AccessGate(session)

    async def create_document(self, owner_id: int, title: str, page_count: int = 1) -> Document:
        """Create the document and its empty pages in one transaction."""
        title = validate_title(title)
        page_count = validate_page_count(page_count)

        now = now_unix()
        document = Document.create_document(owner_id=owner_id, title=title, page_count=page_count, now=now)

        async with unit_of_work(self.session):
            created_document = await self.document_repository.create(document)
            await self.page_repository.create_initial_pages(created_document.id, page_count, now)

        logger.info(f"Document {created_document.id} created by user {owner_id} with {page_count} page(s)")
        return created_document

    async def get_meta(self, doc_id: int, caller_id: int) -> DocumentMeta:
        await self.gate.require_editor(doc_id, caller_id)

        document = await self.document_repository.get_by_id(doc_id)
        if document is None:
            raise DocNotFound()
        pages = await self.page_repository.list_page_meta(doc_id)

        return DocumentMeta(
            id=document.id,
            owner_id=document.owner_id,
            title=document.title,
            page_count=document.page_count,
            created_at=document.created_at,
            updated_at=document.updated_at,
            pages=pages,
        )

    async def list_for_user(
        self,
        user_id: int,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> DocumentListPage:
        page, limit = normalize_pagination(page, limit)
        offset = (page - 1) * limit

        items = await self.document_repository.list_for_user(user_id, limit=limit, offset=offset)
        total = await self.document_repository.count_for_user(user_id)
        return DocumentListPage(items=items, page=page, limit=limit, total=total)

    async def touch(self, doc_id: int, now: Optional[int] = None) -> int:
        async with unit_of_work(self.session):
            return await self.document_repository.touch(doc_id, now if now is not None else now_unix())


class PageService:
    """Open and save pages. Blobs are stored and returned verbatim."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.document_repository = DocumentRepository(session)
        self.page_repository = PageRepository(session)
        self.gate = AccessGate(session)

    async def open_page(self, doc_id: int, page_index: int, caller_id: int) -> PagePayload:
        await self.gate.require_editor(doc_id, caller_id)
        validate_page_index(page_index)

        page = await self.page_repository.get_page(doc_id, page_index)
        if page is None:
            raise PageNotFound()

        return PagePayload(doc_id=doc_id, page_index=page_index, style=page.style, y_update=page.y_update)

    async def upsert_page(
        self,
        doc_id: int,
        page_index: int,
        y_update: bytes,
        caller_id: int,
        style: Optional[int] = None,
    ) -> Tuple[int, int]:
        """
        Insert or overwrite a page, bumping the document's ``updated_at``.

        Concurrent saves of the same page are last-writer-wins; nothing is
        merged server side. Returns ``(rows_affected, updated_at)``.
        """
        await self.gate.require_editor(doc_id, caller_id)
        return await self._save_page(doc_id, page_index, y_update, caller_id, style)

    async def upsert_encoded_page(
        self,
        doc_id: int,
        page_index: int,
        y_update_base64: str,
        caller_id: int,
        style: Optional[int] = None,
    ) -> Tuple[int, int]:
        """``upsert_page`` for a base64 body; the caller is authorized before the body is decoded."""
        await self.gate.require_editor(doc_id, caller_id)
        y_update = decode_update_base64(y_update_base64)
        return await self._save_page(doc_id, page_index, y_update, caller_id, style)

    async def _save_page(
        self,
        doc_id: int,
        page_index: int,
        y_update: bytes,
        caller_id: int,
        style: Optional[int],
    ) -> Tuple[int, int]:
        validate_page_index(page_index)
        style = validate_style(PageStyle.BODY if style is None else style)
        validate_update_bytes(y_update)

        now = now_unix()
        async with unit_of_work(self.session):
            updated = await self.page_repository.upsert_page(doc_id, page_index, int(style), y_update, now)
            await self.document_repository.touch(doc_id, now)

        logger.info(f"Page {page_index} of document {doc_id} saved by user {caller_id} ({len(y_update)} bytes)")
        return updated, now
