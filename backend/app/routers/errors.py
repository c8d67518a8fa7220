"""Translate service errors into HTTP responses."""

import logging

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from app.services.errors import (
    DuplicateReport,
    DuplicateVote,
    PermissionDenied,
    RecordNotFound,
    SelfVote,
    StoreDirectoryError,
    SubmissionNotPending,
    TransientIO,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[StoreDirectoryError], int], ...] = (
    (DuplicateVote, 409),
    (DuplicateReport, 409),
    (SubmissionNotPending, 404),
    (RecordNotFound, 404),
    (SelfVote, 403),
    (PermissionDenied, 403),
    (TransientIO, 503),
)


def to_http_exception(exc: StoreDirectoryError) -> HTTPException:
    """Map a domain error onto the status code reported to API callers."""

    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


async def handle_database_unavailable(request: Request, exc: OperationalError) -> JSONResponse:
    """Report a lost database connection on read routes as 503 instead of 500."""

    logger.warning("database.unavailable path=%s error=%s", request.url.path, exc.orig)
    return JSONResponse(status_code=503, content={"detail": "Database unavailable"})
