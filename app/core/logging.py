"""
app/core/logging.py

Purpose: Logging configuration

- JSON lines in production, coloured single lines in development
- Per-request context (request_id, user_id) carried in a ContextVar
  and stamped onto every record by a handler filter
- Call-site context passed through ``extra=``
"""

import json
import logging
import sys
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Dict

from app.core.config import Settings

# Record attributes rendered as context when present
CONTEXT_FIELDS = (
    "request_id",
    "user_id",
    "post_id",
    "friend_id",
    "method",
    "path",
    "status_code",
    "duration_ms",
)

_request_context: ContextVar[Dict[str, Any]] = ContextVar("request_context", default={})


def start_log_context(**fields: Any) -> Token:
    """Replaces the current request context; pair with ``reset_log_context``."""
    return _request_context.set(dict(fields))


def bind_log_context(**fields: Any) -> None:
    """Adds fields to the current request context."""
    _request_context.set({**_request_context.get(), **fields})


def reset_log_context(token: Token) -> None:
    _request_context.reset(token)


class RequestContextFilter(logging.Filter):
    """Copies request context onto records that don't already carry the field."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _request_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def _context_of(record: logging.LogRecord) -> Dict[str, Any]:
    return {field: getattr(record, field) for field in CONTEXT_FIELDS if hasattr(record, field)}


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        entry.update(_context_of(record))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class DevelopmentFormatter(logging.Formatter):
    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        stamp = datetime.fromtimestamp(record.created).astimezone().strftime("%H:%M:%S%z")
        line = f"{color}[{stamp}] {record.levelname:<8}{self.RESET} {record.name}: {record.getMessage()}"

        context = _context_of(record)
        tags = [f"{key}={context[key]}" for key in ("request_id", "user_id", "post_id") if key in context]
        if tags:
            line += f" [{' '.join(tags)}]"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


def setup_logging(settings: Settings) -> logging.Logger:
    """
    Installs a single stdout handler on the root logger.

    Safe to call more than once; each call replaces the previous handler.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if settings.is_production else DevelopmentFormatter())
    handler.addFilter(RequestContextFilter())

    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)

    # Driver and SDK chatter
    for name in ("motor", "pymongo", "botocore", "boto3", "s3transfer", "uvicorn.access"):
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger("sociopedia")
    logger.debug(f"Logging configured: environment={settings.ENVIRONMENT} level={settings.LOG_LEVEL}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """Namespaced logger, e.g. ``sociopedia.app.services.post_service``."""
    return logging.getLogger(f"sociopedia.{name}")
