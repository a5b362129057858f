"""ASGI middleware binding per-request logging context."""

from __future__ import annotations

import time
import uuid

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from yang_browser_engine.core.logging import client_ip_context, correlation_id_context, get_logger
from yang_browser_engine.core.models import RequestContext

logger = get_logger(__name__)


class CorrelationIdMiddleware:  # pylint: disable=too-few-public-methods
    """Tag each HTTP exchange with a correlation id.

    The id is taken from ``X-Request-ID`` or ``X-Correlation-ID`` when the
    browser sends one, otherwise generated. It is bound for logging, stored as
    ``request.state.request_context`` and echoed in both response headers.
    With ``allow_origin`` set, every response also carries that
    ``Access-Control-Allow-Origin`` value, with or without an ``Origin`` header.
    """

    header_names = ("X-Request-ID", "X-Correlation-ID")

    def __init__(self, app: ASGIApp, *, allow_origin: str | None = None) -> None:
        self.app = app
        self.allow_origin = allow_origin

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        context = RequestContext(
            correlation_id=self._correlation_id(headers),
            path=scope.get("path", ""),
            method=scope.get("method", ""),
            user_agent=headers.get("user-agent"),
        )
        scope.setdefault("state", {})["request_context"] = context
        client = scope.get("client")
        status_code = 500

        async def send_with_ids(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                response_headers = MutableHeaders(scope=message)
                for name in self.header_names:
                    if name not in response_headers:
                        response_headers[name] = context.correlation_id
                if self.allow_origin:
                    response_headers.setdefault("Access-Control-Allow-Origin", self.allow_origin)
            await send(message)

        with (
            correlation_id_context(context.correlation_id),
            client_ip_context(client[0] if client else None),
        ):
            logger.info("REQUEST: %s %s", context.method, context.path)
            started = time.perf_counter()
            try:
                await self.app(scope, receive, send_with_ids)
            finally:
                logger.info(
                    "RESPONSE: %s %s completed",
                    context.method,
                    context.path,
                    extra={
                        "event": "http_request",
                        "status_code": status_code,
                        "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
                    },
                )

    def _correlation_id(self, headers: Headers) -> str:
        for name in self.header_names:
            value = headers.get(name)
            if value:
                return value
        return uuid.uuid4().hex


__all__ = ["CorrelationIdMiddleware"]
