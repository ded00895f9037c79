"""Structured logging for the users API.

Log lines carry the request id and the caller's user id from context
variables, so handlers and services never pass them around explicitly.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)

# Attributes every LogRecord has; anything else came in through extra=
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}

# Third-party loggers and the level they are capped at
_QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "passlib": logging.WARNING,
    "aiosqlite": logging.WARNING,
}


def set_request_context(
    request_id: str | None = None,
    user_id: str | None = None,
) -> None:
    """Bind correlation ids for the current request."""
    if request_id is not None:
        request_id_var.set(request_id)
    if user_id is not None:
        user_id_var.set(user_id)


def clear_request_context() -> None:
    request_id_var.set(None)
    user_id_var.set(None)


def _correlation() -> dict[str, str]:
    ids = {"request_id": request_id_var.get(), "user_id": user_id_var.get()}
    return {k: v for k, v in ids.items() if v}


def _extras(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}


def _timestamp(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=UTC)


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def __init__(self, service_name: str | None = None) -> None:
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": _timestamp(record).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            **_correlation(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        entry.update(_extras(record))

        return json.dumps(
            {k: v for k, v in entry.items() if v is not None},
            default=str,
        )


class TextFormatter(logging.Formatter):
    """Single-line console format for local development."""

    def format(self, record: logging.LogRecord) -> str:
        ids = _correlation()
        tags = []
        if "request_id" in ids:
            tags.append(f"req={ids['request_id'][:8]}")
        if "user_id" in ids:
            tags.append(f"user={ids['user_id'][:8]}")

        parts = [
            _timestamp(record).strftime("%Y-%m-%d %H:%M:%S"),
            f"{record.levelname:8}",
            record.name + (f" [{' '.join(tags)}]" if tags else ""),
            record.getMessage(),
        ]
        extras = _extras(record)
        if extras:
            parts.append(" ".join(f"{k}={v}" for k, v in extras.items()))

        line = " | ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ContextLogger(logging.LoggerAdapter):
    """Adapter merging fields bound at creation into each call's extra."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **kwargs.get("extra", {})}
        return msg, kwargs


def configure_logging(
    level: str = "INFO",
    format_type: str = "json",
    service_name: str = "users-api",
) -> None:
    """Install a single stdout handler on the root logger.

    Args:
        level: Root log level name
        format_type: 'json' for StructuredFormatter, anything else for text
        service_name: Value of the ``service`` field in JSON output
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        StructuredFormatter(service_name=service_name)
        if format_type == "json"
        else TextFormatter()
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name, cap in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(cap)
    # SQL echo only when debugging
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if level.upper() == "DEBUG" else logging.WARNING
    )


def get_logger(name: str, **bound: Any) -> ContextLogger:
    """Return a ContextLogger for ``name`` with ``bound`` fields on every line."""
    return ContextLogger(logging.getLogger(name), bound)
