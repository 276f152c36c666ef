"""Process-wide extension singletons (database, migrations, Redis)."""

from __future__ import annotations

import redis
from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError
from sqlalchemy import MetaData

# Deterministic constraint names keep Alembic diffs stable across backends.
metadata = MetaData(
    naming_convention={
        "ix": "ix_%(table_name)s_%(column_0_name)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

db: SQLAlchemy = SQLAlchemy(metadata=metadata, session_options={"autoflush": False})
migrate = Migrate(render_as_batch=True)
redis_client: redis.Redis | None = None


def _connect_redis(url: str) -> redis.Redis:
    client = redis.Redis.from_url(url)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {url!r}") from exc
    return client


def init_app(app: Flask) -> None:
    """Bind the extensions to ``app``.

    Parameters
    ----------
    app: flask.Flask
        Application being configured. Models are imported here so their
        tables are registered on :data:`metadata` before Flask-Migrate reads
        it. A Redis client is created only when ``REDIS_URL`` is set; an
        unreachable server aborts startup.
    """
    global redis_client

    db.init_app(app)
    from identity_service import models as _models  # noqa: F401

    migrate.init_app(app, db)

    url = app.config.get("REDIS_URL")
    redis_client = _connect_redis(url) if url else None
    if redis_client is None:
        app.extensions.pop("redis_client", None)
    else:
        app.extensions["redis_client"] = redis_client


def get_redis() -> redis.Redis:
    """Return the Redis client created by :func:`init_app`."""
    if redis_client is None:
        raise RuntimeError("Redis client is not initialized; is REDIS_URL set?")
    return redis_client
