"""Tests for the paginated intent type search and module fetch."""
# pylint: disable=missing-function-docstring

import asyncio

import pytest

from tests.fakes import CATALOG_PREFIX, FakeNsp
from yang_browser_engine.core.exceptions import (
    MalformedKeyError,
    SchemaError,
    SessionError,
    TransportError,
)
from yang_browser_engine.core.models import Credentials, IntentTypeKey
from yang_browser_engine.services.intent_catalog import SEARCH_PATH, IntentCatalog
from yang_browser_engine.services.session_manager import SessionManager

CREDS = Credentials(host="nsp.example.net", username="admin", password="s3cret")
SEVEN = [
    ("l3vpn", 1),
    ("l3vpn", 2),
    ("epipe", 1),
    ("vprn_access", 3),
    ("icm-equipment-port", 1),
    ("fabric", 7),
    ("evpn", 1),
]


def _search(nsp: FakeNsp, page_size: int | None = None, *, max_pages: int = 100):
    async def scenario():
        sessions = SessionManager(nsp)
        await sessions.connect(CREDS)
        catalog = IntentCatalog(sessions, nsp, max_pages=max_pages)
        try:
            return await catalog.search_intent_types(page_size)
        finally:
            await sessions.disconnect()

    return asyncio.run(scenario())


def _search_calls(nsp: FakeNsp):
    return [call for call in nsp.calls if call.path == SEARCH_PATH]


def test_seven_items_in_pages_of_three():
    nsp = FakeNsp(intent_types=SEVEN)
    keys = _search(nsp, 3)
    assert keys == [
        "l3vpn_1",
        "l3vpn_2",
        "epipe_1",
        "vprn_access_3",
        "icm-equipment-port_1",
        "fabric_7",
        "evpn_1",
    ]
    calls = _search_calls(nsp)
    pages = [call.json_body["ibn-administration:input"]["page-number"] for call in calls]
    assert pages == [0, 1, 2]
    assert all(call.json_body["ibn-administration:input"]["page-size"] == 3 for call in calls)
    assert all(call.bearer == "token-1" for call in calls)
    assert calls[0].method == "POST"


@pytest.mark.parametrize("page_size", [1, 2, 3, 4, 6, 7, 8, 300])
def test_every_page_size_returns_each_key_once(page_size):
    keys = _search(FakeNsp(intent_types=SEVEN), page_size)
    assert len(keys) == 7
    assert len(set(keys)) == 7


def test_short_reported_page_size_stops_paging():
    nsp = FakeNsp(intent_types=SEVEN, reported_page_size=2)
    keys = _search(nsp, 3)
    assert keys == ["l3vpn_1", "l3vpn_2", "epipe_1"]
    assert len(_search_calls(nsp)) == 1


def test_page_bound_stops_server_that_overreports_totals():
    nsp = FakeNsp(intent_types=SEVEN, reported_total=10_000, repeat_first_page=True)
    keys = _search(nsp, 3, max_pages=5)
    assert keys == ["l3vpn_1", "l3vpn_2", "epipe_1"]
    assert len(_search_calls(nsp)) == 5


def test_empty_catalog():
    nsp = FakeNsp()
    assert not _search(nsp, 3)
    assert len(_search_calls(nsp)) == 1


def test_empty_page_stops_even_if_total_claims_more():
    nsp = FakeNsp(intent_types=SEVEN[:3], reported_total=50)
    keys = _search(nsp, 3)
    assert len(keys) == 3
    assert len(_search_calls(nsp)) == 2


def test_default_page_size_comes_from_settings():
    nsp = FakeNsp(intent_types=SEVEN)
    _search(nsp)
    first = _search_calls(nsp)[0]
    assert first.json_body["ibn-administration:input"]["page-size"] == 300


def test_invalid_page_size():
    with pytest.raises(ValueError):
        _search(FakeNsp(), 0)


def test_search_while_disconnected_fails_without_calls():
    nsp = FakeNsp()
    catalog = IntentCatalog(SessionManager(nsp), nsp)
    with pytest.raises(SessionError):
        asyncio.run(catalog.search_intent_types(3))
    assert not nsp.calls


def test_search_error_status_raises_transport_error():
    with pytest.raises(TransportError) as info:
        _search(FakeNsp(search_status=500), 3)
    assert info.value.status_code == 500


@pytest.mark.parametrize(
    "body",
    [
        {"ibn-administration:output": {"page-size": 3}},
        {"unexpected": True},
        {"ibn-administration:output": {"page-size": 3, "total-count": 1, "intent-type": "x"}},
    ],
)
def test_search_shape_mismatch_raises_schema_error(body):
    with pytest.raises(SchemaError):
        _search(FakeNsp(search_body=body), 3)


def test_search_accepts_unqualified_output_member():
    rows = [{"name": "a", "version": 1}]
    body = {"output": {"page-size": 3, "total-count": 1, "intent-type": rows}}
    assert _search(FakeNsp(search_body=body), 3) == ["a_1"]


def _fetch(nsp: FakeNsp, key):
    async def scenario():
        sessions = SessionManager(nsp)
        await sessions.connect(CREDS)
        try:
            return await IntentCatalog(sessions, nsp).fetch_modules(key)
        finally:
            await sessions.disconnect()

    return asyncio.run(scenario())


def test_fetch_modules_splits_on_last_underscore():
    nsp = FakeNsp(
        modules={
            ("foo_bar", "2"): [
                {"name": "foo-bar", "yang-content": "module foo-bar {}"},
                {"name": "foo-bar-types", "yang-content": "module foo-bar-types {}"},
            ]
        }
    )
    modules = _fetch(nsp, "foo_bar_2")
    assert [module.name for module in modules] == ["foo-bar", "foo-bar-types"]
    assert modules[0].yang_content == "module foo-bar {}"
    call = nsp.calls[1]
    assert call.method == "GET"
    assert call.path == CATALOG_PREFIX + "intent-type=foo_bar,2"
    assert call.bearer == "token-1"


def test_fetch_modules_accepts_parsed_key():
    nsp = FakeNsp(modules={("epipe", "1"): []})
    assert not _fetch(nsp, IntentTypeKey(name="epipe", version=1))


def test_fetch_modules_quotes_name_in_path():
    nsp = FakeNsp(modules={("odd name", "1"): []})
    _fetch(nsp, "odd name_1")
    assert "odd%20name" in nsp.calls[1].url


@pytest.mark.parametrize("key", ["noversion", "_2", "foo_bar", "foo_"])
def test_fetch_modules_rejects_malformed_key(key):
    nsp = FakeNsp()
    with pytest.raises(MalformedKeyError):
        _fetch(nsp, key)
    assert not [call for call in nsp.calls if call.path.startswith(CATALOG_PREFIX)]


def test_fetch_modules_unknown_intent_type():
    with pytest.raises(TransportError) as info:
        _fetch(FakeNsp(), "missing_1")
    assert info.value.status_code == 404


def test_fetch_modules_while_disconnected():
    nsp = FakeNsp()
    catalog = IntentCatalog(SessionManager(nsp), nsp)
    with pytest.raises(SessionError):
        asyncio.run(catalog.fetch_modules("epipe_1"))
    assert not nsp.calls
