"""Thin generic repository over a SQLAlchemy 2.x session.

Repositories only stage and read rows. Transactions belong to the Unit of
Work that hands them their session, so nothing here commits or rolls back,
and nothing here knows about tokens or passwords.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from identity_service.core.extensions import db

E = TypeVar("E")


class BaseRepository(Generic[E]):
    """Persistence helpers for one mapped class, set as ``model`` by subclasses."""

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """
        :param session: Session owned by the enclosing Unit of Work. When
            omitted, the Flask-scoped ``db.session`` is used.
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        return self._session if self._session is not None else cast(Session, db.session)

    def _default_eagerload(self, stmt: Select[Any]) -> Select[Any]:
        """Hook for subclasses to attach loader options to lookups."""
        return stmt

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so its primary key is assigned."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        return self.session.get(self.model, entity_id)

    def first_by(self, **filters: Any) -> E | None:
        """First row whose columns equal ``filters``, with default eager loads."""
        stmt = self._default_eagerload(select(self.model).filter_by(**filters))
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def delete(self, instance: E) -> None:
        """Mark ``instance`` for deletion and flush."""
        self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()
