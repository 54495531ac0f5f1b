import pytest
import pytest_asyncio

from collabdocs.core.errors import (
    CapacityReached, DocNotFound, JoinMessageTooLong, JoinRequestNotFound, NotDocOwner, NotPending,
)
from collabdocs.db.repositories.join_request_repository import JoinRequestRepository
from collabdocs.domains.documents.services import DocumentService
from collabdocs.domains.membership.entities import MAX_MEMBERS, JoinRequestStatus
from collabdocs.domains.membership.services import AccessGate, JoinRequestService, MembershipService

from tests.conftest import EDITOR_ID, OUTSIDER_ID, OWNER_ID


@pytest_asyncio.fixture
async def document(session):
    return await DocumentService(session).create_document(OWNER_ID, "Spec")


async def get_request(session, req_id):
    return await JoinRequestRepository(session).get_by_id(req_id)


async def test_create_request_is_pending(session, document):
    result = await JoinRequestService(session).create_or_update(document.id, EDITOR_ID, " please ")

    assert result.request_id > 0
    assert not result.already_member

    request = await get_request(session, result.request_id)
    assert request.status is JoinRequestStatus.PENDING
    assert request.is_pending
    assert request.message == "please"
    assert request.decided_at is None
    assert request.decided_by is None


async def test_repeat_request_reuses_row_and_coalesces_message(session, document):
    service = JoinRequestService(session)
    first = await service.create_or_update(document.id, EDITOR_ID, "please")

    second = await service.create_or_update(document.id, EDITOR_ID, None)
    assert second.request_id == first.request_id
    assert (await get_request(session, first.request_id)).message == "please"

    third = await service.create_or_update(document.id, EDITOR_ID, "pretty please")
    assert third.request_id == first.request_id
    assert (await get_request(session, first.request_id)).message == "pretty please"


async def test_members_short_circuit(session, document):
    service = JoinRequestService(session)
    await MembershipService(session).add_editor(document.id, EDITOR_ID)

    for user_id in (OWNER_ID, EDITOR_ID):
        result = await service.create_or_update(document.id, user_id, "hi")
        assert result.request_id == 0
        assert result.already_member

    assert await service.list_requests(document.id, OWNER_ID) == []


async def test_request_validation(session, document):
    service = JoinRequestService(session)
    with pytest.raises(DocNotFound):
        await service.create_or_update(document.id + 1, EDITOR_ID)
    with pytest.raises(JoinMessageTooLong):
        await service.create_or_update(document.id, EDITOR_ID, "x" * 501)


async def test_approve_adds_editor_and_records_decision(session, document):
    service = JoinRequestService(session)
    req = await service.create_or_update(document.id, EDITOR_ID, "please")

    await service.approve(req.request_id, OWNER_ID)

    request = await get_request(session, req.request_id)
    assert request.status is JoinRequestStatus.APPROVED
    assert request.decided_by == OWNER_ID
    assert request.decided_at is not None
    assert await MembershipService(session).member_count(document.id) == 2
    assert await AccessGate(session).is_editor(document.id, EDITOR_ID)


async def test_approve_failures(session, document):
    service = JoinRequestService(session)
    req = await service.create_or_update(document.id, EDITOR_ID)

    with pytest.raises(JoinRequestNotFound):
        await service.approve(req.request_id + 100, OWNER_ID)
    with pytest.raises(NotDocOwner):
        await service.approve(req.request_id, OUTSIDER_ID)

    await service.approve(req.request_id, OWNER_ID)
    with pytest.raises(NotPending):
        await service.approve(req.request_id, OWNER_ID)

    assert await MembershipService(session).member_count(document.id) == 2


async def test_approve_at_capacity_leaves_request_pending(session, document):
    membership = MembershipService(session)
    for user_id in range(100, 100 + MAX_MEMBERS - 1):
        await membership.add_editor(document.id, user_id)

    service = JoinRequestService(session)
    req = await service.create_or_update(document.id, EDITOR_ID)

    with pytest.raises(CapacityReached):
        await service.approve(req.request_id, OWNER_ID)

    assert (await get_request(session, req.request_id)).is_pending
    assert await membership.member_count(document.id) == MAX_MEMBERS

    # A freed slot makes the same request approvable
    await membership.remove_member(document.id, 100, OWNER_ID)
    await service.approve(req.request_id, OWNER_ID)
    assert await membership.member_count(document.id) == MAX_MEMBERS


async def test_many_pending_only_first_up_to_capacity_succeed(session, document):
    membership = MembershipService(session)
    for user_id in range(100, 100 + MAX_MEMBERS - 3):
        await membership.add_editor(document.id, user_id)

    service = JoinRequestService(session)
    requests = [await service.create_or_update(document.id, user_id) for user_id in range(200, 205)]

    outcomes = []
    for req in requests:
        try:
            await service.approve(req.request_id, OWNER_ID)
            outcomes.append("approved")
        except CapacityReached:
            outcomes.append("full")

    assert outcomes == ["approved", "approved", "full", "full", "full"]
    assert await membership.member_count(document.id) == MAX_MEMBERS


async def test_deny(session, document):
    service = JoinRequestService(session)
    req = await service.create_or_update(document.id, EDITOR_ID)

    assert await service.deny(req.request_id, OWNER_ID) == 1

    request = await get_request(session, req.request_id)
    assert request.status is JoinRequestStatus.DENIED
    assert request.decided_by == OWNER_ID
    assert request.decided_at is not None

    assert await service.deny(req.request_id, OWNER_ID) == 0
    with pytest.raises(NotPending):
        await service.approve(req.request_id, OWNER_ID)
    assert await MembershipService(session).member_count(document.id) == 1


async def test_deny_guard_failures_are_silent(session, document):
    service = JoinRequestService(session)
    approved = await service.create_or_update(document.id, EDITOR_ID)
    await service.approve(approved.request_id, OWNER_ID)
    pending = await service.create_or_update(document.id, OUTSIDER_ID)

    assert await service.deny(approved.request_id, OWNER_ID) == 0
    assert (await get_request(session, approved.request_id)).status is JoinRequestStatus.APPROVED

    # Editors are not owners
    assert await service.deny(pending.request_id, EDITOR_ID) == 0
    assert (await get_request(session, pending.request_id)).is_pending

    assert await service.deny(9999, OWNER_ID) == 0


async def test_rerequest_after_denial_keeps_denied_status(session, document):
    service = JoinRequestService(session)
    req = await service.create_or_update(document.id, EDITOR_ID, "please")
    await service.deny(req.request_id, OWNER_ID)

    again = await service.create_or_update(document.id, EDITOR_ID, "second try")

    assert again.request_id == req.request_id
    request = await get_request(session, req.request_id)
    assert request.status is JoinRequestStatus.DENIED
    assert request.message == "second try"


async def test_list_requests_pending_first(session, document):
    service = JoinRequestService(session)
    denied = await service.create_or_update(document.id, 10)
    pending_a = await service.create_or_update(document.id, 11)
    pending_b = await service.create_or_update(document.id, 12)
    await service.deny(denied.request_id, OWNER_ID)

    requests = await service.list_requests(document.id, OWNER_ID)

    assert [r.id for r in requests] == [pending_b.request_id, pending_a.request_id, denied.request_id]

    with pytest.raises(NotDocOwner):
        await service.list_requests(document.id, OUTSIDER_ID)
