"""Logging setup: JSON lines in production, coloured console lines otherwise."""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict

from travel_intel.config import get_settings

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# HTTP clients and image decoding are chatty at INFO/DEBUG
QUIET_LOGGERS = ("uvicorn", "httpx", "httpcore", "redis", "PIL")

LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
RESET = "\033[0m"


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Request id plus whatever was passed as ``extra={"extra_fields": {...}}``."""
    context: Dict[str, Any] = {}
    request_id = request_id_var.get()
    if request_id:
        context["request_id"] = request_id
    context.update(getattr(record, "extra_fields", None) or {})
    return context


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL logger:line [req] - message key=value ...``"""

    def format(self, record: logging.LogRecord) -> str:
        context = record_context(record)
        request_id = context.pop("request_id", "")
        color = LEVEL_COLORS.get(record.levelname, RESET)

        line = (
            f"{color}{datetime.now(timezone.utc):%H:%M:%S} {record.levelname:8}{RESET} "
            f"{record.name}:{record.lineno}"
            + (f" [{request_id[:8]}]" if request_id else "")
            + f" - {record.getMessage()}"
        )
        if context:
            line += " " + " ".join(f"{key}={value}" for key, value in context.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging() -> None:
    """Install a single stdout handler on the root logger."""
    settings = get_settings()
    level = getattr(logging, (settings.LOG_LEVEL or "INFO").upper(), logging.INFO)
    formatter = StructuredFormatter() if settings.APP_ENV == "production" else ConsoleFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={"extra_fields": {"environment": settings.APP_ENV, "level": logging.getLevelName(level)}},
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_request_id(request_id: str | None = None) -> str:
    """Bind a correlation id to the current context, generating one if absent."""
    request_id = request_id or str(uuid.uuid4())
    request_id_var.set(request_id)
    return request_id


def clear_request_id() -> None:
    request_id_var.set("")
