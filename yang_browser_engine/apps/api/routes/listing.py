"""Listing route shared by the local and NSP views of the browser."""

from __future__ import annotations

from fastapi import APIRouter, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from yang_browser_engine.apps.api.dependencies import (
    get_intent_catalog,
    get_service_container,
    get_yang_repository,
)
from yang_browser_engine.apps.api.errors import error_response
from yang_browser_engine.core.api_models import ListEntry
from yang_browser_engine.core.exceptions import YangBrowserError

router = APIRouter()


@router.get("/list/{kind}")
async def list_kind(kind: str) -> Response:
    """List local repositories with their files, or NSP intent types.

    ``kind`` is ``local`` or ``nsp``; loose local files are grouped under an
    entry with an empty name.
    """
    container = get_service_container()
    if kind == "local":
        repository = get_yang_repository(container)
        try:
            listings = await run_in_threadpool(repository.list_repositories)
        except OSError as exc:
            return error_response("failed to read local uploads directory", exc)
        entries = [ListEntry(name=item.name, files=item.files or None) for item in listings]
    elif kind == "nsp":
        catalog = get_intent_catalog(container)
        try:
            keys = await catalog.search_intent_types()
        except YangBrowserError as exc:
            return error_response("fetching NSP intent types failed", exc)
        entries = [ListEntry(name=key) for key in keys]
    else:
        return error_response("unsupported kind")

    return JSONResponse([entry.model_dump(exclude_none=True) for entry in entries])


__all__ = ["router"]
