"""Domain error taxonomy.

Every failure a caller can act on carries a stable machine ``code`` and an
HTTP status. Handlers never build error responses themselves; the
application-level exception handlers in ``collabdocs.main`` translate these
one-to-one.
"""

from typing import Optional


class DomainError(Exception):
    status_code = 400
    code = "BAD_REQUEST"
    message = "bad request"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


# Validation (client-correctable input)

class ValidationError(DomainError):
    status_code = 400
    code = "VALIDATION_ERROR"
    message = "invalid input"


class DocTitleEmpty(ValidationError):
    code = "DOC_TITLE_EMPTY"
    message = "document title cannot be empty"


class DocTitleTooLong(ValidationError):
    code = "DOC_TITLE_TOO_LONG"
    message = "document title is too long"


class PageCountInvalid(ValidationError):
    code = "PAGE_COUNT_INVALID"
    message = "page_count must be between 1 and 10"


class PageIndexInvalid(ValidationError):
    code = "PAGE_INDEX_INVALID"
    message = "page_index must be between 0 and 9"


class PageStyleInvalid(ValidationError):
    code = "PAGE_STYLE_INVALID"
    message = "style must be 1 (title), 2 (heading) or 3 (body)"


class UpdateEmpty(ValidationError):
    code = "UPDATE_EMPTY"
    message = "update cannot be empty"


class UpdateTooLarge(ValidationError):
    code = "UPDATE_TOO_LARGE"
    message = "update is too large"


class CannotRemoveOwner(ValidationError):
    code = "CANNOT_REMOVE_OWNER"
    message = "the document owner cannot be removed"


class JoinMessageTooLong(ValidationError):
    code = "JOIN_MESSAGE_TOO_LONG"
    message = "join request message is too long"


# Authentication / authorization

class Unauthorized(DomainError):
    status_code = 401
    code = "UNAUTHORIZED"
    message = "authentication required"


class Forbidden(DomainError):
    status_code = 403
    code = "FORBIDDEN"
    message = "not allowed"


class NotDocEditor(Forbidden):
    code = "NOT_DOC_EDITOR"
    message = "not an editor of this document"


class NotDocOwner(Forbidden):
    code = "NOT_DOC_OWNER"
    message = "not the owner of this document"


# Missing resources

class NotFound(DomainError):
    status_code = 404
    code = "NOT_FOUND"
    message = "resource not found"


class DocNotFound(NotFound):
    code = "DOC_NOT_FOUND"
    message = "document not found"


class PageNotFound(NotFound):
    code = "PAGE_NOT_FOUND"
    message = "page not found"


class JoinRequestNotFound(NotFound):
    code = "JOIN_REQUEST_NOT_FOUND"
    message = "join request not found"


# Conflicts

class Conflict(DomainError):
    status_code = 409
    code = "CONFLICT"
    message = "conflicting update"


class CapacityReached(Conflict):
    code = "DOC_MEMBERS_LIMIT_REACHED"
    message = "document member limit reached"


class NotPending(Conflict):
    code = "JOIN_REQUEST_NOT_PENDING"
    message = "join request is no longer pending"


# Storage

class StorageUnavailable(DomainError):
    """Transient: pool exhausted or write lock not acquired in time. Retry."""

    status_code = 503
    code = "STORAGE_UNAVAILABLE"
    message = "storage temporarily unavailable, retry"
