"""Translation of engine errors into plain-text HTTP responses."""

from __future__ import annotations

from fastapi import status
from fastapi.responses import PlainTextResponse

from yang_browser_engine.core.exceptions import (
    AuthError,
    InvalidArchiveError,
    MalformedKeyError,
    MissingCredentialsError,
    InvalidHostError,
    NotConnectedError,
    RepositoryNotFoundError,
    RevokeError,
    SchemaError,
    SessionError,
    TransportError,
    YangFileNotFoundError,
)
from yang_browser_engine.core.logging import get_logger

logger = get_logger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[Exception], int], ...] = (
    (MissingCredentialsError, status.HTTP_400_BAD_REQUEST),
    (InvalidHostError, status.HTTP_400_BAD_REQUEST),
    (MalformedKeyError, status.HTTP_400_BAD_REQUEST),
    (InvalidArchiveError, status.HTTP_400_BAD_REQUEST),
    (AuthError, status.HTTP_401_UNAUTHORIZED),
    (RepositoryNotFoundError, status.HTTP_404_NOT_FOUND),
    (YangFileNotFoundError, status.HTTP_404_NOT_FOUND),
    (NotConnectedError, status.HTTP_409_CONFLICT),
    (SessionError, status.HTTP_409_CONFLICT),
    (RevokeError, status.HTTP_502_BAD_GATEWAY),
    (TransportError, status.HTTP_502_BAD_GATEWAY),
    (SchemaError, status.HTTP_502_BAD_GATEWAY),
    (ValueError, status.HTTP_400_BAD_REQUEST),
)


def status_for(exc: Exception) -> int:
    """Return the HTTP status a handler should answer ``exc`` with."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(message: str, exc: Exception | None = None) -> PlainTextResponse:
    """Render ``message`` (and the cause, if any) as a plain-text error."""
    if exc is None:
        return PlainTextResponse(message, status_code=status.HTTP_400_BAD_REQUEST)
    status_code = status_for(exc)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s: %s", message, exc)
    return PlainTextResponse(f"{message} / {exc}", status_code=status_code)


__all__ = ["error_response", "status_for"]
