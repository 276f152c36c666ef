"""
Concrete adapters and the wiring that assembles the authentication service.

The service is built once per application from configuration and stored on
``app.extensions["auth_service"]``; request handlers fetch it from there.
"""

from __future__ import annotations

import logging
import secrets

from flask import Flask, current_app

from identity_service.core.extensions import get_redis
from identity_service.infra.jwt import MIN_KEY_BYTES, HmacTokenCodec
from identity_service.infra.redis import RedisRevocationStore
from identity_service.infra.sql import SqlDirectory, SqlRevocationStore
from identity_service.services._shared.errors import ConfigurationError
from identity_service.services._shared.ports import (
    InMemoryRevocationStore,
    RevocationStore,
    WerkzeugPasswordHasher,
)
from identity_service.services.auth import AuthService, AuthTokenConfig

log = logging.getLogger(__name__)

EXTENSION_KEY = "auth_service"
REVOCATION_BACKENDS = ("sql", "redis", "memory")


def _signer_key(app: Flask) -> str | None:
    key = app.config.get("JWT_SIGNER_KEY")
    if not key and app.config.get("DEBUG") and not app.config.get("TESTING"):
        log.warning("JWT_SIGNER_KEY is not set; using an ephemeral development key.")
        key = secrets.token_urlsafe(MIN_KEY_BYTES)
        app.config["JWT_SIGNER_KEY"] = key
    return key


def build_revocation_store(app: Flask) -> RevocationStore:
    """Pick the revocation backend named by ``REVOCATION_BACKEND``."""
    backend = app.config.get("REVOCATION_BACKEND") or ("redis" if app.config.get("REDIS_URL") else "sql")
    backend = str(backend).strip().lower()
    if backend not in REVOCATION_BACKENDS:
        raise ConfigurationError(f"Unknown REVOCATION_BACKEND {backend!r}.")
    if backend == "redis":
        if not app.config.get("REDIS_URL"):
            raise ConfigurationError("REVOCATION_BACKEND 'redis' requires REDIS_URL.")
        return RedisRevocationStore(get_redis())
    if backend == "memory":
        log.warning("Using the in-memory revocation store; revocations are lost on restart.")
        return InMemoryRevocationStore()
    return SqlRevocationStore()


def build_auth_service(app: Flask) -> AuthService:
    """
    Assemble :class:`AuthService` from application config.

    :raises ConfigurationError: If the signer key or durations are unusable.
    """
    cfg = AuthTokenConfig.from_seconds(
        valid=int(app.config["JWT_VALID_DURATION"]),
        refreshable=int(app.config["JWT_REFRESHABLE_DURATION"]),
        issuer=str(app.config["JWT_ISSUER"]),
    )
    return AuthService(
        directory=SqlDirectory(),
        revocation_store=build_revocation_store(app),
        token_codec=HmacTokenCodec(_signer_key(app)),
        token_cfg=cfg,
        password_hasher=WerkzeugPasswordHasher(),
    )


def init_app(app: Flask) -> None:
    """Build the authentication service; refuse to start on bad configuration."""
    app.extensions[EXTENSION_KEY] = build_auth_service(app)


def get_auth_service() -> AuthService:
    """Return the service bound to the current application."""
    return current_app.extensions[EXTENSION_KEY]


__all__ = ["build_auth_service", "build_revocation_store", "get_auth_service", "init_app"]
