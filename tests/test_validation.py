import base64

import pytest

from collabdocs.core.errors import (
    DocTitleEmpty, DocTitleTooLong, JoinMessageTooLong, PageCountInvalid, PageIndexInvalid, PageStyleInvalid,
    UpdateEmpty, UpdateTooLarge,
)
from collabdocs.domains.documents.entities import MAX_UPDATE_BYTES, DocumentListPage, PageStyle
from collabdocs.domains.documents.schemas import PageUpsertRequest
from collabdocs.domains.documents.validation import (
    decode_update_base64, normalize_pagination, validate_page_count, validate_page_index, validate_style,
    validate_title, validate_update_bytes,
)
from collabdocs.domains.membership.entities import JoinRequestStatus, can_transition
from collabdocs.domains.membership.services import normalize_join_message


class TestTitle:
    def test_trims_whitespace(self):
        assert validate_title("  Spec  ") == "Spec"

    @pytest.mark.parametrize("title", ["", "   ", "\t\n"])
    def test_rejects_blank(self, title):
        with pytest.raises(DocTitleEmpty):
            validate_title(title)

    def test_length_counts_characters_not_bytes(self):
        assert validate_title("é" * 120) == "é" * 120
        with pytest.raises(DocTitleTooLong):
            validate_title("é" * 121)


def test_page_count_bounds():
    assert validate_page_count(1) == 1
    assert validate_page_count(10) == 10
    for bad in (0, 11, -1):
        with pytest.raises(PageCountInvalid):
            validate_page_count(bad)


def test_page_index_has_hard_ceiling():
    assert validate_page_index(0) == 0
    assert validate_page_index(9) == 9
    for bad in (-1, 10):
        with pytest.raises(PageIndexInvalid):
            validate_page_index(bad)


def test_style_accepts_only_known_codes():
    assert validate_style(1) is PageStyle.TITLE
    assert validate_style(3) is PageStyle.BODY
    for bad in (0, 4):
        with pytest.raises(PageStyleInvalid):
            validate_style(bad)


def test_update_size_limits():
    assert validate_update_bytes(b"x" * MAX_UPDATE_BYTES)
    with pytest.raises(UpdateEmpty):
        validate_update_bytes(b"")
    with pytest.raises(UpdateTooLarge):
        validate_update_bytes(b"x" * (MAX_UPDATE_BYTES + 1))


@pytest.mark.parametrize(
    "page, limit, expected",
    [
        (None, None, (1, 20)),
        (0, 0, (1, 1)),
        (-3, 500, (1, 100)),
        (4, 25, (4, 25)),
    ],
)
def test_pagination_is_coerced(page, limit, expected):
    assert normalize_pagination(page, limit) == expected


def test_total_pages_is_at_least_one():
    assert DocumentListPage(items=[], page=1, limit=20, total=0).total_pages == 1
    assert DocumentListPage(items=[], page=1, limit=20, total=20).total_pages == 1
    assert DocumentListPage(items=[], page=1, limit=20, total=21).total_pages == 2


def test_join_message_normalization():
    assert normalize_join_message(None) is None
    assert normalize_join_message("   ") is None
    assert normalize_join_message(" please ") == "please"
    assert normalize_join_message("x" * 500) == "x" * 500
    with pytest.raises(JoinMessageTooLong):
        normalize_join_message("x" * 501)


def test_decided_requests_are_terminal():
    assert can_transition(JoinRequestStatus.PENDING, JoinRequestStatus.APPROVED)
    assert can_transition(JoinRequestStatus.PENDING, JoinRequestStatus.DENIED)
    assert not can_transition(JoinRequestStatus.APPROVED, JoinRequestStatus.DENIED)
    assert not can_transition(JoinRequestStatus.DENIED, JoinRequestStatus.APPROVED)
    assert not can_transition(JoinRequestStatus.DENIED, JoinRequestStatus.PENDING)


def test_undecodable_base64_counts_as_empty_update():
    assert decode_update_base64(base64.b64encode(b"abc").decode()) == b"abc"
    with pytest.raises(UpdateEmpty):
        decode_update_base64("not base64!")


def test_page_upsert_style_is_optional():
    assert PageUpsertRequest(y_update_base64="YWJj").style is None
    assert PageUpsertRequest(style=None, y_update_base64="YWJj").style is None
