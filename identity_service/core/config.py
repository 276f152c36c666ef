"""Environment-driven settings: one class per deployment environment.

Token windows, the signer key and the revocation backend are read once at
import, so a process runs with a fixed token policy for its whole life.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Selects the config class: development | testing | production
ENV_VAR: Final[str] = "APP_ENV"

load_dotenv()

_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})


def env_bool(name: str, default: bool = False) -> bool:
    """Read ``name`` as a flag; unset gives ``default``, anything not truthy is ``False``."""
    raw = os.getenv(name)
    return default if raw is None else raw.strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    """Parse an integer (seconds, counts) from an environment variable."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_SIGNER_KEY: str | None
        Symmetric HS512 key for signing session tokens. Must be at least 64
        bytes; the process refuses to start otherwise (except in development,
        where an ephemeral key is generated).
    JWT_VALID_DURATION: int
        Seconds a freshly minted token is accepted for general use.
    JWT_REFRESHABLE_DURATION: int
        Seconds after issuance during which a token may still be exchanged
        through refresh or revoked through logout.
    JWT_ISSUER: str
        Fixed ``iss`` claim written into every token.
    REVOCATION_BACKEND: str | None
        ``"sql"``, ``"redis"`` or ``"memory"``. Defaults to ``"redis"`` when
        ``REDIS_URL`` is set and ``"sql"`` otherwise.
    REDIS_URL: str | None
        Connection URL for the Redis revocation backend.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes. They are read once at startup.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SIGNER_KEY = os.getenv("JWT_SIGNER_KEY")
    JWT_VALID_DURATION = env_int("JWT_VALID_DURATION", 3600)
    JWT_REFRESHABLE_DURATION = env_int("JWT_REFRESHABLE_DURATION", 36000)
    JWT_ISSUER = os.getenv("JWT_ISSUER", "identity-service")

    # Revocation storage
    REVOCATION_BACKEND = os.getenv("REVOCATION_BACKEND")
    REDIS_URL = os.getenv("REDIS_URL")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default. A missing ``JWT_SIGNER_KEY`` is replaced
    by a random per-process key, so tokens do not survive restarts.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)


class TestingConfig(BaseConfig):
    """Test runs: in-memory SQLite (or ``TEST_DATABASE_URL``), no debug, no ephemeral key."""

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
