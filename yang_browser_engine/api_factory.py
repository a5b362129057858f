"""Uvicorn factory entrypoint: ``yang_browser_engine.api_factory:create_app``."""

from __future__ import annotations

from fastapi import FastAPI

from yang_browser_engine.apps.api.app import create_app as _create_app
from yang_browser_engine.bootstrap import build_default_service_container
from yang_browser_engine.core.config import config


def create_app() -> FastAPI:
    """Build the API over the httpx transport and the on-disk uploads store."""
    return _create_app(build_default_service_container(verify_tls=config.NSP_VERIFY_TLS))


__all__ = ["create_app"]
