"""httpx adapter implementing the NSP transport port."""

from __future__ import annotations

from typing import Any, Mapping

import httpx

from yang_browser_engine.core.config import config
from yang_browser_engine.core.exceptions import TransportError
from yang_browser_engine.core.logging import get_logger
from yang_browser_engine.core.ports import TransportPort, TransportResponse

logger = get_logger(__name__)


class HttpxTransport(TransportPort):
    """Concrete transport sharing one pooled ``httpx.AsyncClient``."""

    def __init__(
        self,
        *,
        verify: bool | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if client is None:
            client = httpx.AsyncClient(
                verify=config.NSP_VERIFY_TLS if verify is None else verify,
                timeout=config.NSP_HTTP_TIMEOUT_SECONDS if timeout is None else timeout,
            )
        self._client = client

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
        headers = {"Accept": "application/json"}
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        auth = httpx.BasicAuth(*basic) if basic else None
        try:
            response = await self._client.request(
                method,
                url,
                headers=headers,
                auth=auth,
                json=json_body,
                data=dict(form) if form is not None else None,
            )
        except httpx.TimeoutException as exc:
            logger.warning("NSP request timed out: %s %s", method, url)
            raise TransportError(f"{method} {url} timed out") from exc
        except httpx.InvalidURL as exc:
            logger.warning("NSP request URL rejected: %s %s: %s", method, url, exc)
            raise TransportError(f"{method} {url} is not a valid URL: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.warning("NSP request failed: %s %s: %s", method, url, exc)
            raise TransportError(f"{method} {url} failed: {exc}") from exc
        logger.debug("NSP %s %s -> %d", method, url, response.status_code)
        return TransportResponse(status_code=response.status_code, content=response.content)

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ["HttpxTransport"]
