"""Logging configuration for the submission service.

Every record carries the id of the request that produced it, taken from the
context variable maintained by `RequestIdMiddleware`; records emitted outside
a request show `-`. The level comes from `LOG_LEVEL` unless passed in.
"""
from __future__ import annotations
import logging
import os
from logging.config import dictConfig
from typing import Any, Dict, Optional

from app.http.request_id import request_id_var

LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"

# Chatty third-party loggers and the level they are held at
_QUIET_LOGGERS = {"sqlalchemy.engine": "WARNING", "httpx": "WARNING"}
_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def build_logging_config(level: Optional[str] = None) -> Dict[str, Any]:
    """Return the dictConfig mapping for `level` (default: LOG_LEVEL or INFO)."""
    resolved = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    loggers: Dict[str, Any] = {name: {"level": lvl} for name, lvl in _QUIET_LOGGERS.items()}
    for name in _UVICORN_LOGGERS:
        loggers[name] = {"level": resolved, "handlers": ["stdout"], "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"request_id": {"()": RequestIdFilter}},
        "formatters": {"service": {"format": LOG_FORMAT}},
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "level": resolved,
                "formatter": "service",
                "filters": ["request_id"],
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": resolved, "handlers": ["stdout"]},
        "loggers": loggers,
    }


def configure_logging(level: Optional[str] = None) -> None:
    """Install the service handler unless the root logger already has one."""
    if logging.getLogger().handlers:
        return
    dictConfig(build_logging_config(level))


__all__ = ["LOG_FORMAT", "RequestIdFilter", "build_logging_config", "configure_logging"]
