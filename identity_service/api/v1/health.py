"""Liveness endpoint probing the database and the revocation backend."""

from __future__ import annotations

from flask import Blueprint, current_app
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from identity_service.api.deps import json_response, timing
from identity_service.core.extensions import db, get_redis
from identity_service.infra import get_auth_service
from identity_service.infra.redis import RedisRevocationStore


def _probe_db() -> str:
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("healthcheck.db_error")
        return "fail"
    return "ok"


def _probe_revocations() -> str:
    if not isinstance(get_auth_service().revocations, RedisRevocationStore):
        return "ok"
    try:
        get_redis().ping()
    except RedisError:
        current_app.logger.exception("healthcheck.redis_error")
        return "fail"
    return "ok"


bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Report process, database and revocation store health. Always 200."""

    return json_response(
        {
            "status": "ok",
            "db": _probe_db(),
            "revocations": _probe_revocations(),
            "version": current_app.config.get("APP_VERSION", "dev"),
        }
    )
