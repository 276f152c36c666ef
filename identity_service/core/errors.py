"""RFC 7807 problem responses for every error the API can surface.

Handlers are registered by :func:`init_app`. Service-layer errors are
translated through :meth:`BaseService.translate_exceptions`, so the HTTP
mapping of authentication failures lives in one place.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError
from redis.exceptions import RedisError
from sqlalchemy.exc import OperationalError
from werkzeug.exceptions import HTTPException

from identity_service.core.logger import ensure_request_id
from identity_service.services._shared.errors import ServiceError

log = logging.getLogger(__name__)

# Stable machine codes for statuses raised by Werkzeug itself.
_STATUS_CODES: dict[int, str] = {
    400: "bad_request",
    401: "unauthenticated",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    415: "unsupported_media_type",
    422: "unprocessable_entity",
    500: "internal_server_error",
    503: "service_unavailable",
}


def _as_problem(
    *,
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build the problem document.

    :param status: HTTP status code.
    :param code: Stable machine-readable error code.
    :param message: Client-safe summary, never token or claim internals.
    :param details: Optional structured, client-safe context.
    """
    problem: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": message,
        "instance": request.path if request else None,
        "code": code,
        "request_id": ensure_request_id(),
    }
    if details:
        problem["details"] = details
    return problem


def _respond(
    source: str,
    *,
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
    exc_info: bool = False,
) -> tuple[Response, int]:
    problem = _as_problem(status=status, code=code, message=message, details=details)
    level = logging.ERROR if status >= 500 else logging.WARNING
    log.log(
        level,
        "%s: code=%s status=%s detail=%s request_id=%s",
        source,
        code,
        status,
        message,
        problem["request_id"],
        exc_info=exc_info,
    )
    resp = jsonify(problem)
    resp.mimetype = "application/problem+json"
    return resp, status


class APIError(Exception):
    """
    Error carrying everything needed to render a problem response.

    Parameters
    ----------
    message : str
        Client-facing description.
    status_code : int, optional
        HTTP status. Defaults to ``400``.
    code : str, optional
        Machine-readable snake_case identifier. Defaults to ``"bad_request"``.
    details : dict[str, Any] | None, optional
        Extra structured payload rendered under ``details``.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}


class NotFound(APIError):
    """404 for a missing principal or route-level resource."""

    def __init__(self, message: str = "Resource not found", code: str = "not_found") -> None:
        super().__init__(message, status_code=HTTPStatus.NOT_FOUND, code=code)


class Conflict(APIError):
    """409 when a directory entry collides with an existing one."""

    def __init__(self, message: str = "Conflict", code: str = "conflict") -> None:
        super().__init__(message, status_code=HTTPStatus.CONFLICT, code=code)


class Unauthorized(APIError):
    """401 for any authentication failure; the message stays generic."""

    def __init__(self, message: str = "Unauthenticated") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code="unauthenticated")


class Forbidden(APIError):
    """403 when the caller's scope does not satisfy the route's predicate."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, status_code=HTTPStatus.FORBIDDEN, code="forbidden")


def init_app(app: Flask) -> None:
    """
    Register the problem+json handlers on ``app``.

    4xx responses are logged as warnings without traceback; 5xx responses are
    logged as errors, with traceback where the cause is unexpected.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        return _respond(
            "APIError",
            status=err.status_code,
            code=err.code,
            message=err.message,
            details=err.details or None,
        )

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        # Deferred: the services package imports this module.
        from identity_service.services._shared.base import BaseService

        return handle_api_error(BaseService.translate_exceptions(err))

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = _STATUS_CODES.get(status, "error")
        if status == HTTPStatus.NOT_FOUND and request:
            message = f"Route '{request.path}' not found"
        else:
            message = (err.description or code.replace("_", " ").capitalize()).strip()
        return _respond("HTTPException", status=status, code=code, message=message)

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return _respond(
            "ValidationError",
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            code="validation_error",
            message="Validation failed",
            details={"errors": err.messages},
        )

    @app.errorhandler(OperationalError)
    @app.errorhandler(RedisError)
    def handle_backend_unavailable(err: Exception):
        return _respond(
            type(err).__name__,
            status=HTTPStatus.SERVICE_UNAVAILABLE,
            code="service_unavailable",
            message="Service temporarily unavailable",
            exc_info=True,
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        return _respond(
            "Unhandled exception",
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            code="internal_server_error",
            message="Unexpected error",
            exc_info=True,
        )
