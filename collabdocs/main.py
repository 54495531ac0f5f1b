import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from collabdocs.api.http import (
    documents_router, health_router, join_requests_router, members_router, pages_router
)
from collabdocs.core.config import settings
from collabdocs.core.db import engine, init_db, is_transient_storage_error
from collabdocs.core.errors import Conflict, DomainError, StorageUnavailable, Unauthorized

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 1


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("collabdocs starting up")
    if settings.auto_create_schema:
        await init_db()

    yield

    await engine.dispose()
    logger.info("collabdocs shut down")


app = FastAPI(
    title="collabdocs",
    description="Collaborative documents: pages, members and join requests",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(documents_router)
app.include_router(pages_router)
app.include_router(members_router)
app.include_router(join_requests_router)


def error_response(exc: DomainError) -> JSONResponse:
    headers = None
    if isinstance(exc, Unauthorized):
        headers = {"WWW-Authenticate": "Bearer"}
    elif isinstance(exc, StorageUnavailable):
        headers = {"Retry-After": str(RETRY_AFTER_SECONDS)}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=headers,
    )


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    return error_response(exc)


@app.exception_handler(IntegrityError)
async def integrity_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """A unique or foreign key constraint lost a race with another writer."""
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return error_response(Conflict())


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Logs the full error, returns a generic message."""
    logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "internal error", "code": "INTERNAL"},
    )


@app.exception_handler(DBAPIError)
@app.exception_handler(PoolTimeoutError)
async def storage_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Lock wait or pool acquire timed out, or the connection dropped: clients retry. Anything else is internal."""
    if not is_transient_storage_error(exc):
        return await database_exception_handler(request, exc)

    logger.warning(f"Storage unavailable on {request.method} {request.url.path}: {exc}")
    return error_response(StorageUnavailable())


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "internal error", "code": "INTERNAL"},
    )
