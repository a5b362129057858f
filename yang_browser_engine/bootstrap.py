"""Wiring of the production adapters into the service container."""

from __future__ import annotations

from pathlib import Path

from yang_browser_engine.adapters.transport import HttpxTransport
from yang_browser_engine.adapters.yang_repository import YangRepositoryAdapter
from yang_browser_engine.core.logging import get_logger
from yang_browser_engine.services import ServiceContainer, build_default_services

logger = get_logger(__name__)


def build_default_service_container(
    *, uploads_dir: Path | None = None, verify_tls: bool | None = None
) -> ServiceContainer:
    """Return a container talking to NSP over httpx and storing uploads on disk.

    Arguments left as ``None`` fall back to ``UPLOADS_DIR`` and ``NSP_VERIFY_TLS``.
    """
    repository = YangRepositoryAdapter(uploads_dir)
    if verify_tls is False:
        logger.warning("TLS certificate verification towards NSP is disabled")
    logger.info("Serving local YANG repositories from %s", repository.root)
    return build_default_services(
        transport_port=HttpxTransport(verify=verify_tls),
        repository_port=repository,
    )


__all__ = ["build_default_service_container"]
