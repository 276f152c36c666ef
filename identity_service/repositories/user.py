"""User repository for directory lookups."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from identity_service.models.role import Role
from identity_service.models.user import User
from identity_service.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER handles tokens or sessions; only DB-level user lookups.
    """

    model = User

    def get_by_username(self, username: str) -> User | None:
        """Fetch a user by username, with roles and permissions loaded.

        :param username: Login name (surrounding whitespace is ignored).
        :returns: User instance or ``None`` when not found.
        """
        return self.first_by(username=username.strip())

    def exists_by_username(self, username: str) -> bool:
        """Return ``True`` when a user with the provided username exists."""
        stmt = select(User.id).where(User.username == username.strip())
        return bool(self.session.execute(stmt).first())

    def list_ordered(self) -> list[User]:
        """All users ordered by username, roles loaded."""
        stmt = self._default_eagerload(select(User).order_by(User.username))
        return list(self.session.execute(stmt).scalars().all())

    def _default_eagerload(self, stmt):
        """Load roles and their permissions, refreshing any already in the session."""
        return stmt.options(
            selectinload(User.roles).selectinload(Role.permissions)
        ).execution_options(populate_existing=True)
