"""Tests for the httpx transport adapter."""
# pylint: disable=missing-function-docstring

from __future__ import annotations

import asyncio
import base64
import json

import httpx
import pytest

from yang_browser_engine.adapters.transport import HttpxTransport
from yang_browser_engine.core.exceptions import SchemaError, TransportError


def _transport(handler) -> HttpxTransport:
    return HttpxTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def _send(transport: HttpxTransport, *args, **kwargs):
    async def scenario():
        try:
            return await transport.send(*args, **kwargs)
        finally:
            await transport.aclose()

    return asyncio.run(scenario())


def test_bearer_and_json_body_are_sent():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    response = _send(
        _transport(handler),
        "POST",
        "https://nsp/restconf/operations/x",
        bearer="abc",
        json_body={"page-size": 3},
    )
    assert response.ok
    assert response.json() == {"ok": True}
    request = seen[0]
    assert request.headers["Authorization"] == "Bearer abc"
    assert request.headers["Accept"] == "application/json"
    assert json.loads(request.content) == {"page-size": 3}


def test_basic_auth_and_form_are_sent():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    _send(
        _transport(handler),
        "POST",
        "https://nsp/auth/revocation",
        basic=("admin", "pw"),
        form={"token": "t", "token_type_hint": "token"},
    )
    request = seen[0]
    expected = base64.b64encode(b"admin:pw").decode()
    assert request.headers["Authorization"] == f"Basic {expected}"
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert request.content == b"token=t&token_type_hint=token"


def test_error_status_is_returned_not_raised():
    response = _send(_transport(lambda request: httpx.Response(503)), "GET", "https://nsp/x")
    assert response.status_code == 503
    assert not response.ok


def test_invalid_json_body_raises_schema_error():
    response = _send(
        _transport(lambda request: httpx.Response(200, content=b"<html>")), "GET", "https://nsp/x"
    )
    with pytest.raises(SchemaError):
        response.json()


def test_connection_failure_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError):
        _send(_transport(handler), "GET", "https://nsp/x")


def test_invalid_port_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("request must not be sent")

    with pytest.raises(TransportError, match="not a valid URL"):
        _send(_transport(handler), "POST", "https://nsp:notaport/rest-gateway/x")


def test_timeout_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    with pytest.raises(TransportError, match="timed out"):
        _send(_transport(handler), "GET", "https://nsp/x")
