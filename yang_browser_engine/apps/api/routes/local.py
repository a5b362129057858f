"""Upload and deletion routes for locally stored YANG repositories."""

from __future__ import annotations

from fastapi import APIRouter, File, Response, UploadFile
from fastapi.responses import PlainTextResponse

from yang_browser_engine.apps.api.dependencies import RepositoryDependency
from yang_browser_engine.apps.api.errors import error_response
from yang_browser_engine.core.exceptions import YangBrowserError
from yang_browser_engine.core.ports import YangRepositoryPort

router = APIRouter()

_STORE_ERRORS = (YangBrowserError, ValueError, OSError)


@router.post("/upload")
def upload_repository(repository: RepositoryDependency, file: UploadFile = File(...)) -> Response:
    """Store a zipped YANG repo and keep only its ``.yang`` files."""
    filename = file.filename or ""
    try:
        repository.save_archive(filename, file.file)
    except _STORE_ERRORS as exc:
        return error_response(f"extracting yang files from {filename} failed", exc)
    return PlainTextResponse("Repo uploaded")


@router.post("/upload/file")
def upload_file(repository: RepositoryDependency, file: UploadFile = File(...)) -> Response:
    """Store a single file at the uploads root."""
    return _save_file(repository, file, None)


@router.post("/upload/file/{basename}")
def upload_file_into_repository(
    basename: str, repository: RepositoryDependency, file: UploadFile = File(...)
) -> Response:
    """Store a single file inside an existing repo."""
    return _save_file(repository, file, basename)


def _save_file(
    repository: YangRepositoryPort, file: UploadFile, basename: str | None
) -> Response:
    filename = file.filename or ""
    try:
        repository.save_file(filename, file.file, basename)
    except _STORE_ERRORS as exc:
        return error_response(f"saving file {filename} failed", exc)
    return PlainTextResponse("File uploaded")


# Registered before ``/local/{basename}/{yang}`` so that ``file`` is not read as a repo name.
@router.delete("/local/file/{yang}")
def delete_root_file(yang: str, repository: RepositoryDependency) -> Response:
    """Delete a loose file from the uploads root."""
    return _delete_file(repository, yang, None)


@router.delete("/local/{basename}/{yang}")
def delete_repository_file(basename: str, yang: str, repository: RepositoryDependency) -> Response:
    """Delete one file from a repo."""
    return _delete_file(repository, yang, basename)


@router.delete("/local/{basename}")
def delete_repository(basename: str, repository: RepositoryDependency) -> Response:
    """Delete a repo folder with everything inside it."""
    try:
        repository.delete_repository(basename)
    except _STORE_ERRORS as exc:
        return error_response("error during repo deletion", exc)
    return PlainTextResponse(f"Local repo ({basename}) deleted")


def _delete_file(repository: YangRepositoryPort, yang: str, basename: str | None) -> Response:
    try:
        repository.delete_file(yang, basename)
    except _STORE_ERRORS as exc:
        return error_response("error during file deletion", exc)
    return PlainTextResponse(f"{yang} yang file deleted")


__all__ = ["router"]
