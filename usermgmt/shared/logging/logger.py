"""Loguru setup shared by the HTTP layer and the use cases.

Every record carries ``extra["correlation_id"]``; the value comes from a
ContextVar that the request middleware binds for the lifetime of a request.
"""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from typing import Any

from loguru import logger

from .sensitive_filter import sanitize_record

_NO_CORRELATION = "-"

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default=_NO_CORRELATION)


def _attach_correlation_id(record: dict[str, Any]) -> None:
    record["extra"].setdefault("correlation_id", _correlation_id.get())


logger.configure(patcher=_attach_correlation_id)


class _StdlibBridge(logging.Handler):
    """Forward stdlib records (werkzeug, flask) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def bind_correlation_id(value: str | None) -> None:
    _correlation_id.set(value or _NO_CORRELATION)


def reset_correlation_id() -> None:
    _correlation_id.set(_NO_CORRELATION)


def _sink_options(level: str, *, to_file: bool) -> dict[str, Any]:
    options: dict[str, Any] = {
        "level": level,
        "format": _FORMAT,
        "filter": sanitize_record,
        "backtrace": False,
        "diagnose": False,
        "colorize": not to_file,
    }
    if to_file:
        options.update(enqueue=True, encoding="utf-8", rotation="10 MB", retention=5)
    return options


def setup_logging(level: str | None = None, *, log_file: str | None = None) -> None:
    resolved_level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    log_file = log_file or os.getenv("LOG_FILE")

    logger.remove()
    logger.add(sys.stderr, **_sink_options(resolved_level, to_file=False))
    if log_file:
        directory = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(directory, exist_ok=True)
        logger.add(log_file, **_sink_options(resolved_level, to_file=True))

    logging.basicConfig(handlers=[_StdlibBridge()], level=0, force=True)
    logging.getLogger("werkzeug").setLevel(logging.WARNING)


__all__ = [
    "bind_correlation_id",
    "logger",
    "reset_correlation_id",
    "setup_logging",
]
