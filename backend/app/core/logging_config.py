"""
JSON logging for the API: request correlation IDs, an access log line per
request and a separate ``security.audit`` channel for login activity.
"""

import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

from pythonjsonlogger import jsonlogger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

CORRELATION_HEADER = "X-Correlation-ID"
AUDIT_LOGGER = "security.audit"

correlation_id_var: ContextVar[Optional[str]] = ContextVar(
    "correlation_id", default=None
)

access_logger = logging.getLogger("fableration.access")


class CorrelationIdFilter(logging.Filter):
    """Stamp every record with the ID of the request being served."""

    def filter(self, record):
        record.correlation_id = correlation_id_var.get() or "none"
        return True


class ServiceJsonFormatter(jsonlogger.JsonFormatter):
    """One JSON object per line with timestamp, level and logger name."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record.setdefault(
            "correlation_id", getattr(record, "correlation_id", "none")
        )


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Send all logging, uvicorn's included, to stdout as JSON.

    Returns the audit logger.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ServiceJsonFormatter("%(message)s"))
    handler.addFilter(CorrelationIdFilter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]

    # uvicorn installs its own handlers; replace them so lines are not doubled
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        server_logger = logging.getLogger(name)
        server_logger.handlers = [handler]
        server_logger.propagate = False

    audit = logging.getLogger(AUDIT_LOGGER)
    audit.setLevel(logging.INFO)
    return audit


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Bind a correlation ID to the request, echo it back and log the outcome."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex
        token = correlation_id_var.set(correlation_id)
        request.state.correlation_id = correlation_id
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id
            access_logger.info(
                f"{request.method} {request.url.path} {response.status_code}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 1),
                },
            )
            return response
        finally:
            correlation_id_var.reset(token)


def log_security_event(
    event_type: str,
    message: str,
    level: int = logging.INFO,
    event_category: str = "security",
    **fields,
):
    """
    Write an audit record such as ``auth.login.failure``.

    Keyword fields (``user_id``, ``username``, ``ip_address`` or anything else)
    are attached to the JSON line; fields passed as None are left out.
    """
    extra = {"event_type": event_type, "event_category": event_category}
    extra.update({key: value for key, value in fields.items() if value is not None})
    logging.getLogger(AUDIT_LOGGER).log(level, message, extra=extra)


def get_client_ip(request: Request) -> str:
    """Address of the caller, preferring the first hop a proxy reports."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("X-Real-IP") or (
        request.client.host if request.client else "unknown"
    )
