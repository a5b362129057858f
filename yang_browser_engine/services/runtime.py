"""Process-wide handle on the active service container.

There is one NSP session per process, so there is one container. The FastAPI
app installs it when it is created; route dependencies read it back. Tests
install containers wired to fake ports and clear them afterwards.
"""

from __future__ import annotations

from typing import Optional

from . import ServiceContainer

_active: list[Optional[ServiceContainer]] = [None]


def set_services(container: ServiceContainer) -> None:
    """Install ``container`` as the active one, replacing any previous container."""
    _active[0] = container


def get_services() -> ServiceContainer:
    """Return the active container; ``RuntimeError`` before the app is created."""
    if _active[0] is None:
        raise RuntimeError("Service container has not been configured.")
    return _active[0]


def clear_services() -> None:
    _active[0] = None


__all__ = ["set_services", "get_services", "clear_services"]
