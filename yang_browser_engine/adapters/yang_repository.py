"""Filesystem adapter implementing the YANG repository port.

Uploaded repositories live as folders under ``UPLOADS_DIR``. Each folder holds
the ``.yang`` files extracted from one zip archive, flattened to the folder
root. Loose ``.yang`` files may also sit directly in ``UPLOADS_DIR``.
"""

from __future__ import annotations

import shutil
import zipfile
from pathlib import Path
from typing import BinaryIO

from yang_browser_engine.core.config import config
from yang_browser_engine.core.exceptions import (
    InvalidArchiveError,
    RepositoryNotFoundError,
    YangFileNotFoundError,
)
from yang_browser_engine.core.logging import get_logger
from yang_browser_engine.core.ports import RepositoryListing, YangRepositoryPort

logger = get_logger(__name__)

YANG_SUFFIX = ".yang"


def _safe_name(value: str, kind: str) -> str:
    """Reject names that would escape the uploads directory."""
    name = value.strip()
    if not name or name in {".", ".."} or Path(name).name != name or "\\" in name:
        raise ValueError(f"invalid {kind} name: {value!r}")
    return name


class YangRepositoryAdapter(YangRepositoryPort):
    """Concrete repository store rooted at a directory on disk."""

    def __init__(self, root: Path | None = None) -> None:
        self._root = Path(root if root is not None else config.UPLOADS_DIR)
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def _repository_dir(self, name: str) -> Path:
        folder = self._root / _safe_name(name, "repository")
        if not folder.is_dir():
            raise RepositoryNotFoundError(f"repo ({name}) does not exist")
        return folder

    def save_archive(self, filename: str, stream: BinaryIO) -> str:
        archive_name = _safe_name(filename, "archive")
        repository = Path(archive_name).stem
        if not repository:
            raise ValueError(f"invalid archive name: {filename!r}")
        archive_path = self._root / archive_name
        with archive_path.open("wb") as out:
            shutil.copyfileobj(stream, out)

        try:
            extracted = self._extract_yang_files(archive_path, self._root / repository)
        finally:
            archive_path.unlink(missing_ok=True)
        logger.info("Extracted %d yang files into repo %s", extracted, repository)
        return repository

    @staticmethod
    def _extract_yang_files(archive_path: Path, destination: Path) -> int:
        try:
            archive = zipfile.ZipFile(archive_path)
        except zipfile.BadZipFile as exc:
            raise InvalidArchiveError(f"reading zip file failed: {exc}") from exc

        with archive:
            destination.mkdir(parents=True, exist_ok=True)
            count = 0
            for member in archive.infolist():
                if member.is_dir() or not member.filename.endswith(YANG_SUFFIX):
                    continue
                target = destination / Path(member.filename).name
                with archive.open(member) as src, target.open("wb") as out:
                    shutil.copyfileobj(src, out)
                count += 1
        return count

    def save_file(self, filename: str, stream: BinaryIO, repository: str | None = None) -> None:
        name = _safe_name(filename, "file")
        folder = self._repository_dir(repository) if repository else self._root
        with (folder / name).open("wb") as out:
            shutil.copyfileobj(stream, out)
        logger.info("Saved %s into %s", name, repository or "uploads root")

    def list_repositories(self) -> list[RepositoryListing]:
        entries = sorted(self._root.iterdir(), key=lambda p: p.name)
        listings = [
            RepositoryListing(
                name=entry.name,
                files=sorted(f.name for f in entry.iterdir() if not f.is_dir()),
            )
            for entry in entries
            if entry.is_dir()
        ]
        loose = [
            entry.name
            for entry in entries
            if not entry.is_dir() and entry.suffix.lower() == YANG_SUFFIX
        ]
        listings.append(RepositoryListing(name="", files=loose))
        return listings

    def delete_repository(self, name: str) -> None:
        folder = self._repository_dir(name)
        shutil.rmtree(folder)
        logger.info("Deleted local repo %s", name)

    def delete_file(self, filename: str, repository: str | None = None) -> None:
        name = _safe_name(filename, "file")
        folder = self._repository_dir(repository) if repository else self._root
        target = folder / name
        if not target.is_file():
            raise YangFileNotFoundError(f"{name} yang file does not exist")
        target.unlink()
        logger.info("Deleted %s from %s", name, repository or "uploads root")


__all__ = ["YangRepositoryAdapter", "YANG_SUFFIX"]
