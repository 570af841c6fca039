"""Structured JSON logging with trace_id support."""
from __future__ import annotations

import contextvars
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

trace_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "trace_id", default=""
)

# Extra attributes copied from ``logger.info(..., extra={...})`` into the entry.
_CONTEXT_FIELDS: tuple[str, ...] = (
    "project_id",
    "gate_run_id",
    "check_id",
    "file_path",
)


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON documents."""

    def __init__(self, service_name: str = "unknown") -> None:
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service_name": self.service_name,
            "logger": record.name,
            "trace_id": trace_id_var.get(""),
            "message": record.getMessage(),
        }
        for name in _CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_entry[name] = value
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = str(record.exc_info[1])
        return json.dumps(log_entry)


def setup_logging(service_name: str, level: str = "INFO") -> logging.Logger:
    """Configure structured JSON logging for a service.

    The handler is installed on the ``src`` package logger so every module
    logger (``logging.getLogger(__name__)``) emits through it.

    Args:
        service_name: Name of the service for log entries.
        level: Log level string (e.g. "INFO", "DEBUG").

    Returns:
        The service logger.
    """
    resolved = getattr(logging, level.upper(), logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter(service_name=service_name))

    for name in ("src", service_name):
        target = logging.getLogger(name)
        target.setLevel(resolved)
        target.handlers.clear()
        target.addHandler(handler)

    return logging.getLogger(service_name)


class TraceIDMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that sets a unique trace_id per request."""

    async def dispatch(self, request: Request, call_next: Any) -> Response:
        request_trace_id = request.headers.get("X-Trace-ID") or str(uuid.uuid4())
        token = trace_id_var.set(request_trace_id)
        try:
            response = await call_next(request)
        finally:
            trace_id_var.reset(token)
        response.headers["X-Trace-ID"] = request_trace_id
        return response
