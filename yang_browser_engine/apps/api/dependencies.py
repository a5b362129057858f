"""Shared FastAPI dependencies for service access."""

from typing import Annotated

from fastapi import Depends, HTTPException, status

from yang_browser_engine.core.ports import YangRepositoryPort
from yang_browser_engine.services import ServiceContainer, runtime
from yang_browser_engine.services.intent_catalog import IntentCatalog
from yang_browser_engine.services.session_manager import SessionManager


def get_service_container() -> ServiceContainer:
    """Resolve the globally configured service container."""
    try:
        return runtime.get_services()
    except RuntimeError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Service container not configured",
        ) from exc


def get_session_manager(
    container: Annotated[ServiceContainer, Depends(get_service_container)],
) -> SessionManager:
    """Return the process-wide NSP session manager."""
    if container.sessions is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="NSP session manager is unavailable",
        )
    return container.sessions


def get_intent_catalog(
    container: Annotated[ServiceContainer, Depends(get_service_container)],
) -> IntentCatalog:
    """Return the NSP intent catalog bound to the active session manager."""
    if container.catalog is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="NSP intent catalog is unavailable",
        )
    return container.catalog


def get_yang_repository(
    container: Annotated[ServiceContainer, Depends(get_service_container)],
) -> YangRepositoryPort:
    """Return the local YANG repository store."""
    if container.repository is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Local YANG repository is unavailable",
        )
    return container.repository


SessionsDependency = Annotated[SessionManager, Depends(get_session_manager)]
CatalogDependency = Annotated[IntentCatalog, Depends(get_intent_catalog)]
RepositoryDependency = Annotated[YangRepositoryPort, Depends(get_yang_repository)]


__all__ = [
    "CatalogDependency",
    "RepositoryDependency",
    "SessionsDependency",
    "get_intent_catalog",
    "get_service_container",
    "get_session_manager",
    "get_yang_repository",
]
