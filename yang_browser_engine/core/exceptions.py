"""Core exception types shared across layers."""

from __future__ import annotations


class YangBrowserError(Exception):
    """Base exception for all engine errors."""


class MissingCredentialsError(YangBrowserError):
    """Raised when a connect request omits the host, user or password."""


class InvalidHostError(YangBrowserError, ValueError):
    """Raised when an NSP host is not a bare host name, address or host:port."""


class AuthError(YangBrowserError):
    """Raised when NSP rejects the credentials or the auth endpoint fails."""


class NotConnectedError(YangBrowserError):
    """Raised when a session operation needs an active NSP connection."""


class RevokeError(YangBrowserError):
    """Raised when NSP fails to revoke an access token."""


class SessionError(YangBrowserError):
    """Raised when a catalog operation is attempted while disconnected."""


class TransportError(YangBrowserError):
    """Network failure, timeout or unexpected HTTP status from NSP."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SchemaError(YangBrowserError):
    """Raised when an NSP response body cannot be decoded into the expected shape."""


class MalformedKeyError(YangBrowserError, ValueError):
    """Raised when an intent type key is not of the form ``name_version``."""


class RepositoryNotFoundError(YangBrowserError):
    """Raised when a local YANG repository folder does not exist."""


class YangFileNotFoundError(YangBrowserError):
    """Raised when a local YANG file does not exist."""


class InvalidArchiveError(YangBrowserError, ValueError):
    """Raised when an uploaded repository archive cannot be read."""


__all__ = [
    "YangBrowserError",
    "MissingCredentialsError",
    "InvalidHostError",
    "AuthError",
    "NotConnectedError",
    "RevokeError",
    "SessionError",
    "TransportError",
    "SchemaError",
    "MalformedKeyError",
    "RepositoryNotFoundError",
    "YangFileNotFoundError",
    "InvalidArchiveError",
]
