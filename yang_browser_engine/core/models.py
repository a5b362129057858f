"""Core data transfer objects shared across layers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from yang_browser_engine.core.exceptions import InvalidHostError, MalformedKeyError


@dataclass(slots=True)
class RequestContext:
    """Metadata describing an inbound API request."""

    correlation_id: str
    path: str
    method: str
    user_agent: Optional[str] = None


_HOST_FORBIDDEN_RE = re.compile(r"[/?#@\\\s]")


@dataclass(frozen=True, slots=True)
class Credentials:
    """NSP connection credentials; held in memory for the life of a session only."""

    host: str
    username: str
    password: str = field(repr=False)

    def missing_fields(self) -> list[str]:
        """Return the names of empty credential fields."""
        return [
            name
            for name, value in (
                ("host", self.host),
                ("username", self.username),
                ("password", self.password),
            )
            if not value or not value.strip()
        ]

    def check_host(self) -> None:
        """Reject hosts that would change the path, query or userinfo of NSP URLs."""
        if _HOST_FORBIDDEN_RE.search(self.host):
            raise InvalidHostError(f"invalid NSP host: {self.host!r}")


@dataclass(frozen=True, slots=True)
class Token:
    """An NSP access token and the monotonic time it was acquired.

    ``ttl`` of zero means NSP reported no lifetime: the token never expires
    locally and is never renewed.
    """

    access_token: str = field(repr=False)
    ttl: int
    acquired_at: float

    @property
    def expires_at(self) -> float | None:
        if self.ttl <= 0:
            return None
        return self.acquired_at + self.ttl

    def is_expired(self, now: float) -> bool:
        """True once ``now`` has reached the end of the token lifetime."""
        expires_at = self.expires_at
        return expires_at is not None and now >= expires_at


class SessionState(str, Enum):
    """Externally visible NSP session states."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


@dataclass(frozen=True, slots=True)
class SessionStatus:
    """Non-secret identity of the active session."""

    host: str
    user: str


@dataclass(frozen=True, slots=True)
class SessionLease:
    """Host and token borrowed together for a single NSP call."""

    host: str
    token: Token


_VERSION_RE = re.compile(r"^\d+$")


@dataclass(frozen=True, slots=True)
class IntentTypeKey:
    """Intent type identifier, externally written as ``name_version``."""

    name: str
    version: int

    @classmethod
    def parse(cls, value: str) -> "IntentTypeKey":
        """Split ``value`` on its last underscore into name and version."""
        name, sep, version = value.rpartition("_")
        if not sep:
            raise MalformedKeyError(f"invalid intent type format: {value}")
        if not name:
            raise MalformedKeyError(f"intent type has no name: {value}")
        if not _VERSION_RE.match(version):
            raise MalformedKeyError(f"intent type version is not an integer: {value}")
        return cls(name=name, version=int(version))

    def __str__(self) -> str:
        return f"{self.name}_{self.version}"


@dataclass(slots=True)
class PageCursor:
    """Progress through one paginated intent type search."""

    page_size: int
    page_number: int = 0
    fetched: int = 0

    def advance(self, received: int) -> None:
        self.fetched += received
        self.page_number += 1


class YangModule(BaseModel):
    """A YANG module attached to an intent type."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    yang_content: str = Field(alias="yang-content")


# NSP wire schemas


class TokenGrant(BaseModel):
    """Body returned by the NSP REST gateway token endpoint."""

    access_token: str = Field(min_length=1)
    expires_in: int = Field(default=0, ge=0)


class IntentTypeEntry(BaseModel):
    """One row of an intent type search page."""

    name: str
    version: int


class IntentTypeSearchOutput(BaseModel):
    """Page payload of ``ibn-administration:search-intent-types``."""

    page_size: int = Field(alias="page-size")
    total_count: int = Field(alias="total-count")
    intent_type: List[IntentTypeEntry] = Field(default_factory=list, alias="intent-type")


class IntentTypeSearchResponse(BaseModel):
    """Envelope of a search page; accepts qualified and bare member names."""

    output: IntentTypeSearchOutput = Field(
        validation_alias=AliasChoices("ibn-administration:output", "output")
    )


class IntentTypeModules(BaseModel):
    """Module list nested inside an intent type catalog entry."""

    module: List[YangModule] = Field(default_factory=list)


class IntentTypeDefinition(BaseModel):
    """Envelope of an intent type catalog entry."""

    intent_type: IntentTypeModules = Field(
        validation_alias=AliasChoices("ibn-administration:intent-type", "intent-type")
    )


__all__ = [
    "RequestContext",
    "Credentials",
    "Token",
    "SessionState",
    "SessionStatus",
    "SessionLease",
    "IntentTypeKey",
    "PageCursor",
    "YangModule",
    "TokenGrant",
    "IntentTypeEntry",
    "IntentTypeSearchOutput",
    "IntentTypeSearchResponse",
    "IntentTypeModules",
    "IntentTypeDefinition",
]
