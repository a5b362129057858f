"""Paginated intent type search and YANG module retrieval against NSP."""

from __future__ import annotations

from typing import Type, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from yang_browser_engine.core.config import config
from yang_browser_engine.core.exceptions import (
    NotConnectedError,
    SchemaError,
    SessionError,
    TransportError,
)
from yang_browser_engine.core.logging import get_logger
from yang_browser_engine.core.models import (
    IntentTypeDefinition,
    IntentTypeKey,
    IntentTypeSearchOutput,
    IntentTypeSearchResponse,
    PageCursor,
    SessionLease,
    YangModule,
)
from yang_browser_engine.core.ports import TransportPort, TransportResponse
from yang_browser_engine.services.session_manager import SessionManager

logger = get_logger(__name__)

SEARCH_PATH = "/restconf/operations/ibn-administration:search-intent-types"
CATALOG_PATH = (
    "/restconf/data/ibn-administration:ibn-administration/intent-type-catalog/"
    "intent-type={name},{version}"
)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _decode(model: Type[ModelT], response: TransportResponse, what: str) -> ModelT:
    try:
        return model.model_validate(response.json())
    except ValidationError as exc:
        raise SchemaError(f"decoding {what} response failed: {exc}") from exc


class IntentCatalog:
    """Intent type discovery layered on the session manager's token.

    The catalog never keeps a token: each NSP request borrows the current one.
    """

    def __init__(
        self,
        sessions: SessionManager,
        transport: TransportPort,
        *,
        max_pages: int | None = None,
    ) -> None:
        self._sessions = sessions
        self._transport = transport
        self._max_pages = config.NSP_SEARCH_MAX_PAGES if max_pages is None else max_pages

    async def search_intent_types(self, page_size: int | None = None) -> list[str]:
        """Return every intent type as ``name_version``, in server order.

        Paging continues while the server echoes the requested page size and
        reports more items than fetched so far, and never past ``max_pages``.
        """
        size = config.NSP_SEARCH_PAGE_SIZE if page_size is None else page_size
        if size < 1:
            raise ValueError(f"page size must be positive, got {size}")

        cursor = PageCursor(page_size=size)
        keys: list[str] = []
        seen: set[str] = set()
        while True:
            if cursor.page_number >= self._max_pages:
                logger.warning(
                    "Intent type search stopped at the %d page limit after %d items",
                    self._max_pages,
                    cursor.fetched,
                )
                break

            output = await self._search_page(cursor)
            for entry in output.intent_type:
                key = str(IntentTypeKey(name=entry.name, version=entry.version))
                if key not in seen:
                    seen.add(key)
                    keys.append(key)
            cursor.advance(len(output.intent_type))

            if (
                not output.intent_type
                or output.page_size != cursor.page_size
                or cursor.fetched >= output.total_count
            ):
                break

        logger.info("Fetched %d intent types over %d pages", len(keys), cursor.page_number)
        return keys

    async def fetch_modules(self, intent_type: str | IntentTypeKey) -> list[YangModule]:
        """Return the YANG modules of one intent type, given as ``name_version``."""
        if isinstance(intent_type, IntentTypeKey):
            key = intent_type
        else:
            key = IntentTypeKey.parse(intent_type)
        lease = await self._lease()
        path = CATALOG_PATH.format(name=quote(key.name, safe=""), version=key.version)
        response = await self._transport.send(
            "GET", f"https://{lease.host}{path}", bearer=lease.token.access_token
        )
        if response.status_code != 200:
            raise TransportError(
                f"fetching YANG modules for {key} failed, status: {response.status_code}",
                status_code=response.status_code,
            )
        definition = _decode(IntentTypeDefinition, response, "YANG modules")
        return definition.intent_type.module

    async def _search_page(self, cursor: PageCursor) -> IntentTypeSearchOutput:
        lease = await self._lease()
        payload = {
            "ibn-administration:input": {
                "page-number": cursor.page_number,
                "page-size": cursor.page_size,
            }
        }
        response = await self._transport.send(
            "POST",
            f"https://{lease.host}{SEARCH_PATH}",
            bearer=lease.token.access_token,
            json_body=payload,
        )
        if response.status_code != 200:
            raise TransportError(
                f"fetching intent types failed, status: {response.status_code}",
                status_code=response.status_code,
            )
        return _decode(IntentTypeSearchResponse, response, "intent type search").output

    async def _lease(self) -> SessionLease:
        try:
            return await self._sessions.lease()
        except NotConnectedError as exc:
            raise SessionError(str(exc)) from exc


__all__ = ["IntentCatalog", "SEARCH_PATH", "CATALOG_PATH"]
