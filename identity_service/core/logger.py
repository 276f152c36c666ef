"""JSON logging for the service, correlated per request.

Every record leaving the root handler is a single JSON object carrying the
request id (when emitted inside a request) plus a fixed set of structured
fields that call sites pass through ``extra=``::

    log.info("token issued", extra={"subject": "alice", "jti": token_id})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, Response, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

# ``extra=`` attributes copied into the JSON document when a record carries them.
EXTRA_KEYS = ("endpoint", "elapsed_ms", "subject", "jti", "reason")


class JSONFormatter(logging.Formatter):
    """Serialize a record (and its known extras) as one line of JSON."""

    def format(self, record: logging.LogRecord) -> str:
        doc: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        doc.update({key: getattr(record, key) for key in EXTRA_KEYS if hasattr(record, key)})
        if record.exc_info:
            doc["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(doc, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp ``request_id`` on every record (``None`` outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = ensure_request_id() if has_request_context() else None
        return True


def _incoming_request_id() -> str | None:
    for header in CORRELATION_HEADERS:
        value = request.headers.get(header)
        if value:
            return value
    return None


def ensure_request_id() -> str:
    """
    Return the correlation id of the current request.

    The id is taken from the first correlation header present, or generated,
    and then pinned on ``g`` so every log line and error body agrees. Outside
    a request a throwaway id is returned.
    """
    if not has_request_context():
        return str(uuid4())
    if "request_id" not in g:
        pin_request_id()
    return g.request_id


def pin_request_id() -> str:
    """Bind a fresh id for the request now starting, replacing any left on ``g``."""
    g.request_id = _incoming_request_id() or str(uuid4())
    return g.request_id


def _coerce_level(level: str | int) -> int | str:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else level.upper()


def configure_logging(level: str | int = "INFO") -> None:
    """Replace the root handlers with a single JSON handler on stdout."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_coerce_level(level))


def init_app(app: Flask) -> None:
    """Pin a request id at the start of each request and echo it back."""
    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _pin_request_id() -> None:
        pin_request_id()

    @app.after_request
    def _echo_request_id(response: Response) -> Response:
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = ["JSONFormatter", "configure_logging", "ensure_request_id", "init_app", "pin_request_id"]
