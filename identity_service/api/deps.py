"""Shared API helpers: bearer authentication, capability checks, responses."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from identity_service.core.errors import Forbidden, Unauthorized
from identity_service.infra import get_auth_service
from identity_service.services._shared.errors import ServiceError
from identity_service.services._shared.ports import TokenClaims

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "bearer "


def bearer_token() -> str:
    """Extract the token from ``Authorization: Bearer <token>``."""
    header = request.headers.get("Authorization", "")
    if not header.lower().startswith(BEARER_PREFIX):
        raise Unauthorized()
    token = header[len(BEARER_PREFIX) :].strip()
    if not token:
        raise Unauthorized()
    return token


def current_claims() -> TokenClaims:
    """Return the verified claims stored by :func:`require_auth`."""
    claims = g.get("current_claims")
    if claims is None:
        raise RuntimeError("current_claims() used outside a @require_auth handler.")
    return claims


def require_auth(func: F) -> F:
    """Verify the bearer token (normal mode) and expose its claims on ``g``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.pop("current_claims", None)
        service = get_auth_service()
        try:
            g.current_claims = service.verify(bearer_token())
        except ServiceError as exc:
            raise service.translate_exceptions(exc) from exc
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_predicate(predicate: Callable[..., bool]) -> Callable[[F], F]:
    """
    Authenticate, then allow the call only if ``predicate(claims, **view_args)`` holds.

    The predicate receives the current principal explicitly, so gating never
    depends on ambient security context.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def guarded(*args: Any, **kwargs: Any):
            if not predicate(current_claims(), **kwargs):
                raise Forbidden("Insufficient scope")
            return func(*args, **kwargs)

        return require_auth(guarded)  # type: ignore[return-value]

    return decorator


def json_response(payload: Any, *, status: int = 200) -> Response:
    resp = jsonify(payload)
    resp.status_code = status
    return resp


def timing(func: F) -> F:
    """Log the handler's wall time at DEBUG as ``request.elapsed``."""

    @functools.wraps(func)
    def timed(*args: Any, **kwargs: Any):
        started = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            current_app.logger.debug(
                "request.elapsed",
                extra={
                    "endpoint": request.endpoint,
                    "elapsed_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )

    return timed  # type: ignore[return-value]
