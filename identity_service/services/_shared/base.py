# identity_service/services/_shared/base.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from identity_service.core import errors as api_errors
from identity_service.services._shared.errors import (
    ConflictError,
    NotFoundError,
    ServiceError,
    UnauthenticatedError,
)


@dataclass(slots=True)
class ServiceContext:
    """
    Request-scoped data a service may attach to its logs.

    :param request_id: Correlation id of the triggering request, if any.
    """

    request_id: str | None = None


class BaseService:
    """
    Common base for application services.

    Services never touch Flask. They share the request context handed in by
    the HTTP layer and the mapping of their errors onto HTTP problems.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        self.ctx = ctx or ServiceContext()

    def log_extra(self, **fields: Any) -> dict[str, Any]:
        """``extra=`` mapping for service logs, stamped with the context's request id."""
        return {"request_id": self.ctx.request_id, **fields}

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Return the :class:`~identity_service.core.errors.APIError` matching ``exc``.

        ``NotFoundError`` becomes 404 ``user_not_exists``,
        ``UnauthenticatedError`` (and subclasses) 401 with the constant
        message, ``ConflictError`` 409 ``<entity>_exists`` and any other
        ``ServiceError`` 400.
        Exceptions from outside the service layer are returned unchanged.
        """
        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc), code="user_not_exists")
        if isinstance(exc, UnauthenticatedError):
            return api_errors.Unauthorized(str(exc))
        if isinstance(exc, ConflictError):
            return api_errors.Conflict(str(exc), code=f"{exc.entity.lower()}_exists")
        if isinstance(exc, ServiceError):
            return api_errors.APIError(message=str(exc), status_code=400, code="bad_request")
        return exc
