"""A failure part-way through a write leaves no partial state behind."""

import pytest

from collabdocs.core.errors import NotPending
from collabdocs.db.repositories.document_repository import DocumentRepository
from collabdocs.db.repositories.join_request_repository import JoinRequestRepository
from collabdocs.db.repositories.page_repository import PageRepository
from collabdocs.domains.documents.entities import PageStyle
from collabdocs.domains.documents.services import DocumentService, PageService
from collabdocs.domains.membership.services import AccessGate, JoinRequestService, MembershipService

from tests.conftest import EDITOR_ID, OWNER_ID


async def test_failed_page_seeding_discards_the_document(session, monkeypatch):
    async def broken(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(PageRepository, "create_initial_pages", broken)

    service = DocumentService(session)
    with pytest.raises(RuntimeError):
        await service.create_document(OWNER_ID, "Spec", page_count=3)

    listing = await service.list_for_user(OWNER_ID)
    assert listing.total == 0
    assert listing.items == []


async def test_failed_touch_discards_the_page_write(session, monkeypatch):
    document = await DocumentService(session).create_document(OWNER_ID, "Spec")

    async def broken(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(DocumentRepository, "touch", broken)

    with pytest.raises(RuntimeError):
        await PageService(session).upsert_page(document.id, 0, b"lost", OWNER_ID, style=PageStyle.TITLE)

    page = await PageRepository(session).get_page(document.id, 0)
    assert page.y_update == b""
    assert page.style == PageStyle.BODY
    assert (await DocumentRepository(session).get_by_id(document.id)).updated_at == document.updated_at


async def test_approve_that_loses_the_decision_adds_no_editor(session, monkeypatch):
    document = await DocumentService(session).create_document(OWNER_ID, "Spec")
    service = JoinRequestService(session)
    req = await service.create_or_update(document.id, EDITOR_ID)

    async def already_decided(*args, **kwargs):
        return 0

    monkeypatch.setattr(JoinRequestRepository, "mark_approved", already_decided)

    with pytest.raises(NotPending):
        await service.approve(req.request_id, OWNER_ID)

    assert await MembershipService(session).member_count(document.id) == 1
    assert not await AccessGate(session).is_editor(document.id, EDITOR_ID)
    assert (await JoinRequestRepository(session).get_by_id(req.request_id)).is_pending
