"""In-memory NSP stand-in implementing the transport port."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.parse import unquote, urlsplit

from yang_browser_engine.core.exceptions import TransportError
from yang_browser_engine.core.ports import TransportResponse
from yang_browser_engine.services.intent_catalog import SEARCH_PATH
from yang_browser_engine.services.session_manager import AUTH_REVOKE_PATH, AUTH_TOKEN_PATH

CATALOG_PREFIX = "/restconf/data/ibn-administration:ibn-administration/intent-type-catalog/"


@dataclass
class Call:
    """One request seen by the fake."""

    method: str
    url: str
    bearer: str | None = None
    basic: tuple[str, str] | None = None
    json_body: Any = None
    form: Mapping[str, str] | None = None

    @property
    def path(self) -> str:
        return unquote(urlsplit(self.url).path)


def _json(status_code: int, body: Any) -> TransportResponse:
    return TransportResponse(status_code=status_code, content=json.dumps(body).encode())


@dataclass
class FakeNsp:  # pylint: disable=too-many-instance-attributes
    """Scriptable NSP server.

    ``ttls`` are handed out one per issued token; the last one repeats.
    ``intent_types`` is the full catalog, served page by page.
    """

    ttls: list[int] = field(default_factory=lambda: [0])
    intent_types: list[tuple[str, int]] = field(default_factory=list)
    modules: dict[tuple[str, str], list[dict[str, str]]] = field(default_factory=dict)
    reported_page_size: int | None = None
    reported_total: int | None = None
    repeat_first_page: bool = False
    auth_status: int = 200
    auth_body: Any = None
    revoke_status: int = 200
    search_status: int = 200
    search_body: Any = None
    fail_paths: set[str] = field(default_factory=set)
    revoke_gate: asyncio.Event | None = None
    revoke_entered: asyncio.Event | None = None
    calls: list[Call] = field(default_factory=list)
    issued: list[str] = field(default_factory=list)
    active: set[str] = field(default_factory=set)
    closed: bool = False

    def count(self, path: str) -> int:
        return sum(1 for call in self.calls if call.path == path)

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
        call = Call(method, url, bearer, basic, json_body, form)
        self.calls.append(call)
        await asyncio.sleep(0)
        if call.path in self.fail_paths:
            raise TransportError(f"{method} {url} failed: connection refused")
        if call.path == AUTH_TOKEN_PATH:
            return self._issue()
        if call.path == AUTH_REVOKE_PATH:
            return await self._revoke(form or {})
        if bearer not in self.active:
            return _json(401, {"error": "invalid token"})
        if call.path == SEARCH_PATH:
            return self._search(json_body)
        if call.path.startswith(CATALOG_PREFIX):
            return self._modules(call.path)
        return _json(404, {"error": "not found"})

    async def aclose(self) -> None:
        self.closed = True

    def _issue(self) -> TransportResponse:
        if self.auth_status != 200:
            return _json(self.auth_status, {"error": "invalid_client"})
        if self.auth_body is not None:
            return _json(200, self.auth_body)
        ttl = self.ttls[min(len(self.issued), len(self.ttls) - 1)]
        token = f"token-{len(self.issued) + 1}"
        self.issued.append(token)
        self.active.add(token)
        return _json(200, {"access_token": token, "expires_in": ttl, "token_type": "Bearer"})

    async def _revoke(self, form: Mapping[str, str]) -> TransportResponse:
        if self.revoke_entered is not None:
            self.revoke_entered.set()
        if self.revoke_gate is not None:
            await self.revoke_gate.wait()
        if self.revoke_status != 200:
            return _json(self.revoke_status, {"error": "server_error"})
        self.active.discard(form.get("token", ""))
        return TransportResponse(status_code=200)

    def _search(self, body: Any) -> TransportResponse:
        if self.search_status != 200 or self.search_body is not None:
            return _json(self.search_status, self.search_body or {"error": "failed"})
        page_input = body["ibn-administration:input"]
        number, size = page_input["page-number"], page_input["page-size"]
        start = 0 if self.repeat_first_page else number * size
        rows = self.intent_types[start : start + size]
        output = {
            "page-size": size if self.reported_page_size is None else self.reported_page_size,
            "total-count": (
                len(self.intent_types) if self.reported_total is None else self.reported_total
            ),
            "intent-type": [{"name": name, "version": version} for name, version in rows],
        }
        return _json(200, {"ibn-administration:output": output})

    def _modules(self, path: str) -> TransportResponse:
        name, _, version = path.removeprefix(CATALOG_PREFIX + "intent-type=").rpartition(",")
        modules = self.modules.get((name, version))
        if modules is None:
            return _json(404, {"error": "unknown intent type"})
        return _json(200, {"ibn-administration:intent-type": {"module": modules}})


class RecordingSleep:
    """Sleep stand-in: records delays, returns at once for the first ``release`` calls.

    Later calls park until cancelled, like a long real sleep.
    """

    def __init__(self, release: int = 0) -> None:
        self.delays: list[float] = []
        self.parked = asyncio.Event()
        self._release = release

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        if len(self.delays) > self._release:
            self.parked.set()
            await asyncio.Event().wait()
        await asyncio.sleep(0)


__all__ = ["Call", "FakeNsp", "RecordingSleep", "CATALOG_PREFIX"]
