from collabdocs.api.http.health import router as health_router
from collabdocs.api.http.documents import router as documents_router
from collabdocs.api.http.pages import router as pages_router
from collabdocs.api.http.members import router as members_router
from collabdocs.api.http.join_requests import router as join_requests_router

__all__ = [
    "health_router",
    "documents_router",
    "pages_router",
    "members_router",
    "join_requests_router"
]
