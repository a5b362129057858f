"""NSP session lifecycle: connect, disconnect and background token renewal.

A single :class:`SessionManager` owns the only NSP access token in the process.
Every read and write of the session fields goes through one ``asyncio.Lock``.
Network calls happen outside the lock, except the revoke-and-reacquire step of
a renewal, which runs as one critical section so that concurrent readers wait
for the new token instead of seeing a revoked one.

Each successful connect starts a new *generation*. The renewal task carries
the generation it was started for and exits as soon as it notices a newer one,
both before sleeping and right after waking. Disconnect and reconnect also
cancel and await the old task, so no renewal lineage outlives its session.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, Optional

from pydantic import ValidationError

from yang_browser_engine.core.config import config
from yang_browser_engine.core.exceptions import (
    AuthError,
    MissingCredentialsError,
    NotConnectedError,
    RevokeError,
    SchemaError,
    TransportError,
    YangBrowserError,
)
from yang_browser_engine.core.logging import get_logger, nsp_host_context
from yang_browser_engine.core.models import (
    Credentials,
    SessionLease,
    SessionState,
    SessionStatus,
    Token,
    TokenGrant,
)
from yang_browser_engine.core.ports import TransportPort

logger = get_logger(__name__)

AUTH_TOKEN_PATH = "/rest-gateway/rest/api/v1/auth/token"
AUTH_REVOKE_PATH = "/rest-gateway/rest/api/v1/auth/revocation"

SessionLostCallback = Callable[[YangBrowserError], None]
SleepFunction = Callable[[float], Awaitable[None]]


def _gateway_url(host: str, path: str) -> str:
    return f"https://{host}{path}"


class SessionManager:  # pylint: disable=too-many-instance-attributes
    """Single authoritative holder of the NSP connection and its access token."""

    def __init__(
        self,
        transport: TransportPort,
        *,
        safety_margin: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: SleepFunction = asyncio.sleep,
        on_session_lost: Optional[SessionLostCallback] = None,
    ) -> None:
        self._transport = transport
        self._safety_margin = (
            config.NSP_RENEWAL_MARGIN_SECONDS if safety_margin is None else safety_margin
        )
        self._clock = clock
        self._sleep = sleep
        self._on_session_lost = on_session_lost

        self._lock = asyncio.Lock()
        self._state = SessionState.DISCONNECTED
        self._credentials: Credentials | None = None
        self._token: Token | None = None
        self._generation = 0
        self._renewal_task: asyncio.Task[None] | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is SessionState.CONNECTED

    async def connect(self, credentials: Credentials) -> SessionStatus:
        """Authenticate against NSP and start the renewal task for the new session.

        A failed attempt leaves any existing session untouched. A successful one
        replaces it: the old renewal task is stopped and the superseded token is
        revoked best effort.
        """
        missing = credentials.missing_fields()
        if missing:
            raise MissingCredentialsError(f"NSP credentials are missing: {', '.join(missing)}")
        credentials.check_host()

        token = await self._acquire_token(credentials)

        async with self._lock:
            superseded = (self._credentials, self._token) if self.is_connected else None
            previous_task = self._renewal_task
            self._generation += 1
            self._credentials = credentials
            self._token = token
            self._state = SessionState.CONNECTED
            self._renewal_task = asyncio.create_task(
                self._renewal_loop(self._generation, credentials.host),
                name=f"nsp-token-renewal-{self._generation}",
            )

        await self._stop_renewal(previous_task)
        if superseded is not None:
            await self._revoke_superseded(*superseded)

        logger.info("Connected to NSP %s as %s", credentials.host, credentials.username)
        return SessionStatus(host=credentials.host, user=credentials.username)

    async def disconnect(self) -> None:
        """Revoke the token and drop the session.

        Local state is cleared and the renewal task stopped before the revoke
        call, so a ``RevokeError`` still leaves the manager disconnected.
        """
        async with self._lock:
            if not self.is_connected:
                raise NotConnectedError("NSP is not connected")
            credentials, token = self._credentials, self._token
            task = self._clear_locked()

        await self._stop_renewal(task)
        assert credentials is not None and token is not None  # nosec B101
        await self._revoke_token(credentials, token)
        logger.info("Disconnected from NSP %s", credentials.host)

    async def status(self) -> SessionStatus:
        """Return the host and user of the active session."""
        credentials, _ = await self._live_session()
        return SessionStatus(host=credentials.host, user=credentials.username)

    async def current_token(self) -> Token:
        """Return the current access token."""
        _, token = await self._live_session()
        return token

    async def lease(self) -> SessionLease:
        """Return the host and current token read in one critical section."""
        credentials, token = await self._live_session()
        return SessionLease(host=credentials.host, token=token)

    async def aclose(self) -> None:
        """Disconnect on shutdown, logging instead of raising revoke failures."""
        try:
            await self.disconnect()
        except NotConnectedError:
            return
        except RevokeError as exc:
            logger.warning("Revoking NSP token on shutdown failed: %s", exc)

    async def _live_session(self) -> tuple[Credentials, Token]:
        """Snapshot credentials and token; an expired token drops the session."""
        async with self._lock:
            credentials, token = self._credentials, self._token
            if not self.is_connected or credentials is None or token is None:
                raise NotConnectedError("NSP is not connected")
            if not token.is_expired(self._clock()):
                return credentials, token
            task = self._clear_locked()

        await self._stop_renewal(task)
        logger.warning("NSP (%s) access token expired; session dropped", credentials.host)
        raise NotConnectedError("NSP access token expired")

    def _clear_locked(self) -> asyncio.Task[None] | None:
        """Drop the session and hand back the renewal task for the caller to stop."""
        self._generation += 1
        self._state = SessionState.DISCONNECTED
        self._credentials = None
        self._token = None
        task, self._renewal_task = self._renewal_task, None
        return task

    async def _stop_renewal(self, task: asyncio.Task[None] | None) -> None:
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        await asyncio.wait({task})

    async def _acquire_token(self, credentials: Credentials) -> Token:
        response = await self._transport.send(
            "POST",
            _gateway_url(credentials.host, AUTH_TOKEN_PATH),
            basic=(credentials.username, credentials.password),
            json_body={"grant_type": "client_credentials"},
        )
        if not response.ok:
            raise AuthError(
                f"NSP ({credentials.host}) authentication failed, status: {response.status_code}"
            )
        try:
            grant = TokenGrant.model_validate(response.json())
        except (SchemaError, ValidationError) as exc:
            raise AuthError(f"decoding NSP token response failed: {exc}") from exc
        return Token(
            access_token=grant.access_token, ttl=grant.expires_in, acquired_at=self._clock()
        )

    async def _revoke_token(self, credentials: Credentials, token: Token) -> None:
        try:
            response = await self._transport.send(
                "POST",
                _gateway_url(credentials.host, AUTH_REVOKE_PATH),
                basic=(credentials.username, credentials.password),
                form={"token": token.access_token, "token_type_hint": "token"},
            )
        except TransportError as exc:
            raise RevokeError(f"disconnecting from NSP ({credentials.host}) failed: {exc}") from exc
        if not response.ok:
            raise RevokeError(
                f"disconnecting from NSP ({credentials.host}) failed, "
                f"status: {response.status_code}"
            )

    async def _revoke_superseded(
        self, credentials: Credentials | None, token: Token | None
    ) -> None:
        if credentials is None or token is None:
            return
        try:
            await self._revoke_token(credentials, token)
        except RevokeError as exc:
            logger.warning("Revoking superseded NSP token failed: %s", exc)

    async def _renewal_loop(self, generation: int, host: str) -> None:
        with nsp_host_context(host):
            await self._renew_until_superseded(generation)

    async def _renew_until_superseded(self, generation: int) -> None:
        while True:
            async with self._lock:
                if generation != self._generation or self._token is None:
                    return
                ttl = self._token.ttl
            delay = ttl - self._safety_margin
            if delay <= 0:
                logger.info(
                    "NSP token ttl of %ss is within the %ss renewal margin; not renewing",
                    ttl,
                    self._safety_margin,
                )
                return

            await self._sleep(delay)

            async with self._lock:
                if generation != self._generation:
                    return
                try:
                    await self._renew_locked()
                except YangBrowserError as exc:
                    failure = exc
                    self._clear_locked()
                else:
                    continue
            self._report_session_lost(failure)
            return

    async def _renew_locked(self) -> None:
        assert self._credentials is not None and self._token is not None  # nosec B101
        credentials = self._credentials
        logger.info("NSP (%s) access renewal initiated", credentials.host)
        await self._revoke_token(credentials, self._token)
        self._token = await self._acquire_token(credentials)
        logger.info("NSP (%s) access renewed", credentials.host)

    def _report_session_lost(self, error: YangBrowserError) -> None:
        logger.error("NSP session lost during token renewal: %s", error)
        if self._on_session_lost is None:
            return
        try:
            self._on_session_lost(error)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("Session-lost observer failed")


__all__ = [
    "AUTH_REVOKE_PATH",
    "AUTH_TOKEN_PATH",
    "SessionLostCallback",
    "SessionManager",
]
