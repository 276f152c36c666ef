"""User directory endpoints: registration and administration."""

from __future__ import annotations

from flask import Blueprint, request

from identity_service.api.deps import (
    current_claims,
    json_response,
    require_auth,
    require_predicate,
    timing,
)
from identity_service.core.logger import ensure_request_id
from identity_service.schemas import UserCreateSchema, UserSchema
from identity_service.services._shared.base import ServiceContext
from identity_service.services._shared.errors import ServiceError
from identity_service.services._shared.policies.common import is_admin, is_self_or_admin
from identity_service.services.users import UserRegisterIn, UserService

bp = Blueprint("users", __name__)

user_schema = UserSchema()
user_list_schema = UserSchema(many=True)
user_create_schema = UserCreateSchema()


def _service() -> UserService:
    return UserService(ctx=ServiceContext(request_id=ensure_request_id()))


@bp.post("")
@timing
def register():
    """Register a new user with the default role. Open to anonymous callers."""

    data = user_create_schema.load(request.get_json(silent=True) or {})
    service = _service()
    try:
        out = service.register(UserRegisterIn(username=data["username"], password=data["password"]))
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"data": user_schema.dump(out)}, status=201)


@bp.get("")
@require_predicate(is_admin)
@timing
def list_users():
    """List every user. Admins only."""

    return json_response({"data": user_list_schema.dump(_service().list_users())})


@bp.get("/me")
@require_auth
@timing
def my_info():
    """Return the directory record of the token's bearer."""

    service = _service()
    try:
        out = service.get_user(current_claims().subject)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"data": user_schema.dump(out)})


@bp.get("/<string:username>")
@require_predicate(is_self_or_admin)
@timing
def get_user(username: str):
    """Return one user. Allowed for the user itself or admins."""

    service = _service()
    try:
        out = service.get_user(username)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"data": user_schema.dump(out)})


@bp.delete("/<string:username>")
@require_predicate(is_admin)
@timing
def delete_user(username: str):
    """Remove a user. Admins only."""

    service = _service()
    try:
        service.delete_user(username)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return "", 204
