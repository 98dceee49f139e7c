"""
Structured logging for the CircleCI provider.

Provides a pre-configured logger that emits JSON-structured log records
with operation context (project, resource, operation) for easy filtering
in log aggregation tools. Secret values are never passed to it.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any

_CONTEXT_KEYS = ("request_id", "project", "resource", "operation", "status_code")


def new_request_id() -> str:
    """Return a short correlation ID shared by the log lines of one request."""
    return uuid.uuid4().hex[:12]


class StructuredFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Attach any extras injected via ProviderLogger.log_operation
        for key in _CONTEXT_KEYS:
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = str(record.exc_info[1])
        return json.dumps(log_entry)


class ProviderLogger:
    """Convenience wrapper around :mod:`logging` for provider operations."""

    def __init__(self, name: str = "circleci_provider") -> None:
        self.logger = logging.getLogger(name)
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    def log_operation(
        self,
        level: int,
        message: str,
        *,
        project: str | None = None,
        resource: str | None = None,
        operation: str | None = None,
        status_code: int | None = None,
        request_id: str | None = None,
        exc_info: bool = False,
    ) -> None:
        """Emit a structured log record with operation context.

        Args:
            level: Logging level (e.g. logging.INFO).
            message: Human-readable message.
            project: CircleCI project name.
            resource: Environment variable name.
            operation: Operation name (e.g. 'create').
            status_code: HTTP status code, when a response was received.
            request_id: Optional correlation ID; auto-generated if omitted.
            exc_info: Whether to include exception info.
        """
        extra = {
            "project": project,
            "resource": resource,
            "operation": operation,
            "status_code": status_code,
            "request_id": request_id or new_request_id(),
        }
        self.logger.log(level, message, extra=extra, exc_info=exc_info)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.DEBUG, message, **kwargs)


# Module-level singleton
cp_logger = ProviderLogger()
