"""Application service layer: NSP session, intent catalog and local repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from yang_browser_engine.core.ports import TransportPort, YangRepositoryPort

from .intent_catalog import IntentCatalog
from .session_manager import SessionLostCallback, SessionManager


@dataclass(slots=True)
class ServiceContainer:
    """Aggregate of application-level services available to handlers."""

    sessions: Optional[SessionManager] = None
    catalog: Optional[IntentCatalog] = None
    repository: Optional[YangRepositoryPort] = None
    transport: Optional[TransportPort] = None

    async def aclose(self) -> None:
        """Drop the NSP session and release the transport."""
        if self.sessions is not None:
            await self.sessions.aclose()
        if self.transport is not None:
            await self.transport.aclose()


def build_default_services(
    *,
    transport_port: TransportPort,
    repository_port: Optional[YangRepositoryPort] = None,
    on_session_lost: Optional[SessionLostCallback] = None,
) -> ServiceContainer:
    """Return a service container with the session manager and catalog wired."""

    sessions = SessionManager(transport_port, on_session_lost=on_session_lost)
    return ServiceContainer(
        sessions=sessions,
        catalog=IntentCatalog(sessions, transport_port),
        repository=repository_port,
        transport=transport_port,
    )


__all__ = ["ServiceContainer", "build_default_services"]
