from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

MAX_TITLE_CHARS = 120
MIN_PAGE_COUNT = 1
MAX_PAGE_COUNT = 10
# Hard ceiling on addressable pages, independent of a document's page_count
MAX_PAGE_INDEX = 9
MAX_UPDATE_BYTES = 512 * 1024


class PageStyle(IntEnum):
    TITLE = 1
    HEADING = 2
    BODY = 3


class Document:
    """A titled container of pages with exactly one owner."""

    def __init__(
        self,
        id: Optional[int],
        owner_id: int,
        title: str,
        page_count: int,
        created_at: int,
        updated_at: int,
    ):
        self.id = id
        self.owner_id = owner_id
        self.title = title
        self.page_count = page_count
        self.created_at = created_at
        self.updated_at = updated_at

    def is_owner(self, user_id: int) -> bool:
        return self.owner_id == user_id

    @classmethod
    def create_document(cls, owner_id: int, title: str, page_count: int, now: int) -> "Document":
        return cls(
            id=None,
            owner_id=owner_id,
            title=title,
            page_count=page_count,
            created_at=now,
            updated_at=now,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return False
        return self.id == other.id

    def __repr__(self) -> str:
        return f"Document(id={self.id}, title={self.title!r}, owner_id={self.owner_id})"


@dataclass
class PageMeta:
    page_index: int
    style: int
    updated_at: int


@dataclass
class PagePayload:
    """What a client needs to hydrate its editor: style plus the merged update blob."""

    doc_id: int
    page_index: int
    style: int
    y_update: bytes


@dataclass
class DocumentMeta:
    id: int
    owner_id: int
    title: str
    page_count: int
    created_at: int
    updated_at: int
    pages: List[PageMeta] = field(default_factory=list)


@dataclass
class DocumentPage:
    doc_id: int
    page_index: int
    style: int
    y_update: bytes
    created_at: int
    updated_at: int


@dataclass
class DocumentListPage:
    items: List[Document]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        if self.total == 0:
            return 1
        return max(1, (self.total + self.limit - 1) // self.limit)
