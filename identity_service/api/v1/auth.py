"""Session token endpoints backed by :class:`AuthService`."""

from __future__ import annotations

from flask import Blueprint, request
from marshmallow import ValidationError

from identity_service.api.deps import (
    current_claims,
    json_response,
    require_auth,
    require_predicate,
    timing,
)
from identity_service.infra import get_auth_service
from identity_service.schemas import (
    AuthenticationResponseSchema,
    AuthenticationSchema,
    CurrentPrincipalSchema,
    IntrospectResponseSchema,
    PrincipalScopeSchema,
    TokenSchema,
)
from identity_service.services._shared.errors import ServiceError
from identity_service.services._shared.policies.common import is_self_or_admin
from identity_service.services.auth import AuthenticateIn, IntrospectOut, TokenIn

bp = Blueprint("auth", __name__)

authentication_schema = AuthenticationSchema()
token_schema = TokenSchema()
authentication_response_schema = AuthenticationResponseSchema()
introspect_response_schema = IntrospectResponseSchema()
current_principal_schema = CurrentPrincipalSchema()
principal_scope_schema = PrincipalScopeSchema()


def _token_in() -> TokenIn:
    data = token_schema.load(request.get_json(silent=True) or {})
    return TokenIn(token=data["token"])


def _token_in_or_none() -> TokenIn | None:
    """Like :func:`_token_in`, but an absent or malformed field yields ``None``."""
    try:
        return _token_in()
    except ValidationError:
        return None


@bp.post("/token")
@timing
def authenticate():
    """Exchange username/password for a session token."""

    data = authentication_schema.load(request.get_json(silent=True) or {})
    service = get_auth_service()
    try:
        out = service.authenticate(AuthenticateIn(username=data["username"], password=data["password"]))
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"data": authentication_response_schema.dump(out)})


@bp.post("/introspect")
@timing
def introspect():
    """Report whether a token is currently valid. Always 200."""

    dto = _token_in_or_none()
    out = IntrospectOut(valid=False) if dto is None else get_auth_service().introspect(dto)
    return json_response({"data": introspect_response_schema.dump(out)})


@bp.post("/refresh")
@timing
def refresh():
    """Exchange a token inside its refresh window for a new one."""

    dto = _token_in()
    service = get_auth_service()
    try:
        out = service.refresh(dto)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"data": authentication_response_schema.dump(out)})


@bp.post("/logout")
@timing
def logout():
    """Revoke a token. Succeeds even when the token is already unusable."""

    dto = _token_in_or_none()
    if dto is not None:
        get_auth_service().logout(dto)
    return "", 204


@bp.get("/me")
@require_auth
@timing
def me():
    """Describe the bearer of the request's token."""

    return json_response({"data": current_principal_schema.dump(current_claims())})


@bp.get("/users/<string:username>/scope")
@require_predicate(is_self_or_admin)
@timing
def principal_scope(username: str):
    """Return a principal's scope string. Allowed for the principal itself or admins."""

    service = get_auth_service()
    try:
        scope = service.scope_of(username)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"data": principal_scope_schema.dump({"username": username, "scope": scope})})
