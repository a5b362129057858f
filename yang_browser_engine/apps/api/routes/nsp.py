"""NSP session and intent catalog routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from yang_browser_engine.apps.api.dependencies import CatalogDependency, SessionsDependency
from yang_browser_engine.apps.api.errors import error_response
from yang_browser_engine.core.api_models import NspConnectRequest, NspStatusResponse
from yang_browser_engine.core.exceptions import YangBrowserError
from yang_browser_engine.core.models import Credentials

router = APIRouter(prefix="/nsp")


@router.post("/connect")
async def nsp_connect(request: NspConnectRequest, sessions: SessionsDependency) -> Response:
    """Open the NSP session; the token is renewed in the background from here on."""
    credentials = Credentials(host=request.ip, username=request.user, password=request.password)
    try:
        await sessions.connect(credentials)
    except YangBrowserError as exc:
        return error_response("error making NSP connection", exc)
    return PlainTextResponse("NSP connected")


@router.post("/disconnect")
async def nsp_disconnect(sessions: SessionsDependency) -> Response:
    """Revoke the token and close the NSP session."""
    try:
        await sessions.disconnect()
    except YangBrowserError as exc:
        return error_response("disconnecting from NSP failed", exc)
    return PlainTextResponse("NSP disconnected")


@router.get("/status")
async def nsp_status(sessions: SessionsDependency) -> Response:
    """Report which NSP host and user the backend is connected as."""
    try:
        current = await sessions.status()
    except YangBrowserError as exc:
        return error_response("NSP is not connected", exc)
    body = NspStatusResponse(ip=current.host, user=current.user)
    return JSONResponse(body.model_dump())


@router.get("/intent-types")
async def nsp_intent_types(
    catalog: CatalogDependency,
    page_size: int | None = Query(default=None, ge=1),
) -> Response:
    """List every intent type as ``name_version``."""
    try:
        keys = await catalog.search_intent_types(page_size)
    except YangBrowserError as exc:
        return error_response("fetching NSP intent types failed", exc)
    return JSONResponse(keys)


@router.get("/intent-types/{intent_type}/modules")
async def nsp_intent_type_modules(intent_type: str, catalog: CatalogDependency) -> Response:
    """Return the YANG modules of one intent type."""
    try:
        modules = await catalog.fetch_modules(intent_type)
    except YangBrowserError as exc:
        return error_response("error fetching YANG modules", exc)
    content: list[dict[str, Any]] = [module.model_dump(by_alias=True) for module in modules]
    return JSONResponse(content)


__all__ = ["router"]
