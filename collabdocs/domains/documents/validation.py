import base64
import binascii
from typing import Optional, Tuple

from collabdocs.core.errors import (
    DocTitleEmpty, DocTitleTooLong, PageCountInvalid, PageIndexInvalid, PageStyleInvalid,
    UpdateEmpty, UpdateTooLarge,
)
from collabdocs.domains.documents.entities import (
    MAX_PAGE_COUNT, MAX_PAGE_INDEX, MAX_TITLE_CHARS, MAX_UPDATE_BYTES, MIN_PAGE_COUNT, PageStyle,
)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def validate_title(title: str) -> str:
    """Return the trimmed title or raise. Length is counted in code points."""
    cleaned = (title or "").strip()
    if not cleaned:
        raise DocTitleEmpty()
    if len(cleaned) > MAX_TITLE_CHARS:
        raise DocTitleTooLong()
    return cleaned


def validate_page_count(page_count: int) -> int:
    if not MIN_PAGE_COUNT <= page_count <= MAX_PAGE_COUNT:
        raise PageCountInvalid()
    return page_count


def validate_page_index(page_index: int) -> int:
    if not 0 <= page_index <= MAX_PAGE_INDEX:
        raise PageIndexInvalid()
    return page_index


def validate_style(style: int) -> PageStyle:
    try:
        return PageStyle(style)
    except ValueError:
        raise PageStyleInvalid() from None


def validate_update_bytes(data: bytes) -> bytes:
    if not data:
        raise UpdateEmpty()
    if len(data) > MAX_UPDATE_BYTES:
        raise UpdateTooLarge()
    return data


def decode_update_base64(encoded: str) -> bytes:
    """Undecodable input counts as an empty update."""
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise UpdateEmpty() from None


def normalize_pagination(page: Optional[int], limit: Optional[int]) -> Tuple[int, int]:
    # Coerce, never reject
    page = max(1, page if page is not None else 1)
    limit = limit if limit is not None else DEFAULT_PAGE_SIZE
    limit = min(max(1, limit), MAX_PAGE_SIZE)
    return page, limit
