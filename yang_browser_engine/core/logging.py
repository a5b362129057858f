"""JSON logging with request and NSP session context.

Records carry the correlation id and client address bound by the API
middleware, and the NSP host of the session the code is acting for. The token
renewal task runs outside any request, so it binds the host itself to keep its
records attributable.

Handlers are installed once on the ``yang_browser_engine`` package logger;
module loggers obtained through :func:`get_logger` propagate to it.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar, Token
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator, Optional

from pythonjsonlogger import jsonlogger

from yang_browser_engine.core.config import settings

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
_client_ip: ContextVar[Optional[str]] = ContextVar("client_ip", default=None)
_nsp_host: ContextVar[Optional[str]] = ContextVar("nsp_host", default=None)

PACKAGE_LOGGER = "yang_browser_engine"
LOG_LEVEL = getattr(logging, str(settings.YANG_BROWSER_LOG_LEVEL).upper(), logging.INFO)

BASE_DIR = Path(__file__).resolve().parent.parent
ROOT_DIR = BASE_DIR.parent


def _resolve_logs_dir() -> Path:
    """Return the first logs directory that can be created.

    Order: ``YANG_BROWSER_LOG_DIR``, ``<checkout>/logs``, ``DATA_DIR/logs``,
    then a ``logs`` folder inside the package.
    """
    candidates = [
        Path(path)
        for path in (
            settings.YANG_BROWSER_LOG_DIR,
            ROOT_DIR / "logs",
            Path(settings.DATA_DIR) / "logs",
            BASE_DIR / "logs",
        )
        if path
    ]
    for candidate in candidates:
        try:
            candidate.mkdir(parents=True, exist_ok=True)
        except OSError:
            continue
        return candidate
    raise PermissionError(f"none of {[str(c) for c in candidates]} is writable")


LOGS_DIR = _resolve_logs_dir()
LOG_FILE_PATH = LOGS_DIR / "yang_browser.log"
LOG_SCHEMA_VERSION = "1.0.0"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 5

_CONTEXT_FIELDS = ("correlation_id", "client_ip", "nsp_host")


class VersionedJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter stamping every entry with the log schema version."""

    def __init__(self, *args, schema_version: str, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._schema_version = schema_version

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault("schema_version", self._schema_version)


class CorrelationIdFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """Copy the bound request and session context onto each record; ``-`` when unbound."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = _correlation_id.get() or "-"
        record.client_ip = _client_ip.get() or "-"
        record.nsp_host = _nsp_host.get() or "-"
        return True


def bind_correlation_id(value: Optional[str]) -> Token[Optional[str]]:
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[Optional[str]]) -> None:
    _correlation_id.reset(token)


def get_correlation_id() -> Optional[str]:
    return _correlation_id.get()


def bind_client_ip(value: Optional[str]) -> Token[Optional[str]]:
    return _client_ip.set(value)


def reset_client_ip(token: Token[Optional[str]]) -> None:
    _client_ip.reset(token)


def get_client_ip() -> Optional[str]:
    return _client_ip.get()


def get_nsp_host() -> Optional[str]:
    return _nsp_host.get()


@contextmanager
def _bound(var: ContextVar[Optional[str]], value: Optional[str]) -> Iterator[None]:
    token = var.set(value)
    try:
        yield
    finally:
        var.reset(token)


def correlation_id_context(value: Optional[str]):
    """Bind a correlation id for the duration of the ``with`` block."""
    return _bound(_correlation_id, value)


def client_ip_context(value: Optional[str]):
    """Bind the caller's address for the duration of the ``with`` block."""
    return _bound(_client_ip, value)


def nsp_host_context(value: Optional[str]):
    """Bind the NSP host a block of work is performed against."""
    return _bound(_nsp_host, value)


def _build_formatter() -> VersionedJsonFormatter:
    fields = ["%(asctime)s", "%(levelname)s", "%(name)s", "%(message)s"]
    fields += [f"%({name})s" for name in _CONTEXT_FIELDS]
    return VersionedJsonFormatter(
        " ".join(fields),
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger",
            "correlation_id": "cid",
            "nsp_host": "nsp",
        },
        datefmt="%Y-%m-%d %H:%M:%S",
        json_ensure_ascii=False,
        schema_version=LOG_SCHEMA_VERSION,
    )


def _install_handlers(logger: logging.Logger) -> None:
    if logger.handlers:
        return
    formatter = _build_formatter()
    context_filter = CorrelationIdFilter()
    handlers: list[logging.Handler] = [
        logging.StreamHandler(sys.stdout),
        RotatingFileHandler(
            LOG_FILE_PATH, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
        ),
    ]
    for handler in handlers:
        handler.addFilter(context_filter)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(LOG_LEVEL)
    # records stop here; uvicorn owns the root handlers
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``, wiring the shared JSON handlers on first use.

    Names outside the package get the handlers attached directly.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    _install_handlers(package_logger)
    logger = logging.getLogger(name)
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        _install_handlers(logger)
    return logger


__all__ = [
    "CorrelationIdFilter",
    "bind_correlation_id",
    "bind_client_ip",
    "reset_correlation_id",
    "reset_client_ip",
    "get_correlation_id",
    "get_client_ip",
    "get_nsp_host",
    "correlation_id_context",
    "client_ip_context",
    "nsp_host_context",
    "get_logger",
    "LOG_FILE_PATH",
    "LOG_SCHEMA_VERSION",
    "PACKAGE_LOGGER",
]
