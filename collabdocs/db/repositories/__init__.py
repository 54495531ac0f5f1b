from collabdocs.db.repositories.document_repository import DocumentRepository
from collabdocs.db.repositories.page_repository import PageRepository
from collabdocs.db.repositories.membership_repository import MembershipRepository
from collabdocs.db.repositories.join_request_repository import JoinRequestRepository

__all__ = [
    "DocumentRepository",
    "PageRepository",
    "MembershipRepository",
    "JoinRequestRepository"
]
