from collabdocs.db.models.document import Document, DocumentPage
from collabdocs.db.models.membership import DocumentCollaborator, DocumentJoinRequest

__all__ = [
    "Document",
    "DocumentPage",
    "DocumentCollaborator",
    "DocumentJoinRequest",
]
