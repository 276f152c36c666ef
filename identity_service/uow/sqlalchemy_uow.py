"""
Units of Work over the Flask-SQLAlchemy session.
"""

from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.orm import Session

from identity_service.core.extensions import db
from identity_service.repositories import (
    PermissionRepository,
    RevokedTokenRepository,
    RoleRepository,
    UserRepository,
)
from identity_service.uow.base import UnitOfWork


class SQLAlchemyRepositoryContainer:
    """Directory and revocation repositories bound to one session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=session)
        self.roles = RoleRepository(session=session)
        self.permissions = PermissionRepository(session=session)
        self.revoked_tokens = RevokedTokenRepository(session=session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-write scope: commit on clean exit, rollback on exception.

    A failed commit is rolled back before the error propagates, so the
    request-scoped session is usable again afterwards.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read scope for lookups (principals, revocation checks).

    While open, a ``before_flush`` listener rejects any pending ORM change.
    The transaction itself is left to the surrounding scope (request teardown
    or an enclosing writer), and :meth:`commit` is refused.
    """

    def __init__(self) -> None:
        # Listen on this thread's Session, not on the scoped_session registry.
        super().__init__(session=db.session())
        self._guarding = False

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        event.listen(self.session, "before_flush", self._reject_flush)
        self._guarding = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._guarding:
            event.remove(self.session, "before_flush", self._reject_flush)
            self._guarding = False

    @staticmethod
    def _reject_flush(session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError(
                "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
            )

    def commit(self) -> None:
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()
