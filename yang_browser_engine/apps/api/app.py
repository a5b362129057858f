"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from yang_browser_engine.apps.api.middleware import CorrelationIdMiddleware
from yang_browser_engine.apps.api.routes import health, listing, local, nsp
from yang_browser_engine.core.config import config
from yang_browser_engine.core.logging import get_logger
from yang_browser_engine.services import ServiceContainer, runtime

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Register the service container at startup; drop the NSP session on shutdown."""
    logger.info("Initializing yang browser engine...")
    services = getattr(app.state, "services", None)
    if isinstance(services, ServiceContainer):
        runtime.set_services(services)
    try:
        yield
    finally:
        if isinstance(services, ServiceContainer):
            await services.aclose()
        logger.info("yang browser engine stopped.")


def create_app(services: ServiceContainer | None = None) -> FastAPI:
    """Build the FastAPI application with configured routers."""
    if services is None:
        raise RuntimeError("Service container must be provided when creating the app.")
    app = FastAPI(lifespan=lifespan)
    app.state.services = services
    runtime.set_services(services)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOW_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        CorrelationIdMiddleware,
        allow_origin="*" if "*" in config.CORS_ALLOW_ORIGINS else None,
    )

    app.include_router(health.router)
    app.include_router(listing.router)
    app.include_router(local.router)
    app.include_router(nsp.router)
    return app


__all__ = ["create_app", "lifespan"]
