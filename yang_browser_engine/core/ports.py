"""Protocol definitions for infrastructure adapters."""

# pylint: disable=unnecessary-ellipsis

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, BinaryIO, Mapping, Protocol

from yang_browser_engine.core.exceptions import SchemaError


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """Status and raw body of one HTTP exchange."""

    status_code: int
    content: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Decode the body as JSON, raising ``SchemaError`` on invalid input."""
        try:
            return json.loads(self.content)
        except ValueError as exc:
            raise SchemaError(f"response body is not valid JSON: {exc}") from exc


@dataclass(frozen=True, slots=True)
class RepositoryListing:
    """A local YANG repository and the files it holds.

    The unnamed listing (``name == ""``) gathers loose files at the uploads root.
    """

    name: str
    files: list[str]


class TransportPort(Protocol):
    """Port performing a single authenticated HTTP exchange with NSP."""

    async def send(
        self,
        method: str,
        url: str,
        *,
        bearer: str | None = None,
        basic: tuple[str, str] | None = None,
        json_body: Any | None = None,
        form: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        """Send one request and return its response.

        ``bearer`` and ``basic`` select the authorization header the adapter
        attaches. Network failures and timeouts raise ``TransportError``.
        """
        ...

    async def aclose(self) -> None:
        """Release pooled connections."""
        ...


class YangRepositoryPort(Protocol):
    """Port exposing the local store of uploaded YANG repositories."""

    def save_archive(self, filename: str, stream: BinaryIO) -> str:
        """Store a zip archive, extract its ``.yang`` files and return the repo name."""
        ...

    def save_file(self, filename: str, stream: BinaryIO, repository: str | None = None) -> None:
        """Store one file at the uploads root or inside ``repository``."""
        ...

    def list_repositories(self) -> list[RepositoryListing]:
        """Return every repository followed by the loose ``.yang`` files."""
        ...

    def delete_repository(self, name: str) -> None:
        """Remove the repository folder ``name`` and its contents."""
        ...

    def delete_file(self, filename: str, repository: str | None = None) -> None:
        """Remove one file from the uploads root or from ``repository``."""
        ...


__all__ = ["TransportResponse", "RepositoryListing", "TransportPort", "YangRepositoryPort"]
