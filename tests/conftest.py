"""Shared fixtures: one app per run, one SAVEPOINT-isolated session per test.

Tests talk to an in-memory SQLite database through the real Flask-SQLAlchemy
``db.session``, which is swapped for a session bound to a single connection.
Whatever a test writes (including commits made by Units of Work) is rolled
back with the outer transaction when the test ends.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from identity_service.core.config import TestingConfig
from identity_service.core.extensions import db as _db
from identity_service.factory import create_app

SIGNER_KEY = "test-signer-key-" + "k" * 64


class TestConfig(TestingConfig):
    """Fixed token policy and SQL revocations; never touches Redis."""

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_SIGNER_KEY = SIGNER_KEY
    JWT_VALID_DURATION = 3600
    JWT_REFRESHABLE_DURATION = 36000
    JWT_ISSUER = "identity-service"
    REVOCATION_BACKEND = "sql"
    REDIS_URL = None
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app():
    """The application under test, built once from :class:`TestConfig`."""
    os.environ.pop("DATABASE_URL", None)
    application = create_app(TestConfig)
    application.logger.setLevel("WARNING")
    return application


@pytest.fixture(scope="session")
def db(app):
    """Schema created once for the run, inside a run-wide app context."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """The single connection every test session is bound to."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(app, db, connection):
    """
    ``db.session`` replaced by a session inside ``BEGIN`` + ``SAVEPOINT``.

    Commits only release the SAVEPOINT, which is then re-opened, so the
    outer rollback at teardown discards everything the test did. Each test
    also gets its own app context, so nothing left on ``g`` outlives it.
    """
    ctx = app.app_context()
    ctx.push()
    outer = connection.begin()
    scoped = scoped_session(sessionmaker(bind=connection, future=True))
    savepoint = connection.begin_nested()

    @event.listens_for(scoped(), "after_transaction_end")
    def _reopen_savepoint(sess, trans):  # pragma: no cover
        nonlocal savepoint
        if trans.nested and not trans._parent.nested:
            savepoint = connection.begin_nested()

    original = db.session
    db.session.remove()
    db.session = scoped
    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original
        outer.rollback()
        ctx.pop()


@pytest.fixture(scope="session")
def faker():
    """Seeded :class:`faker.Faker` for reproducible generated data."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture(autouse=True)
def _factories_session(session):
    """Point every Factory Boy factory at the current test session."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
