"""Directory adapter reading principals from the ``users``/``roles``/``permissions`` tables."""

from __future__ import annotations

from identity_service.models.user import User
from identity_service.services._shared.ports import Directory, Principal, RoleGrant
from identity_service.uow import SQLAlchemyReadOnlyUnitOfWork


def to_principal(user: User) -> Principal:
    """Snapshot a :class:`User` row (roles and permissions ordered by name)."""
    return Principal(
        username=user.username,
        password_hash=user.password_hash,
        roles=tuple(
            RoleGrant(name=role.name, permissions=tuple(p.name for p in role.permissions))
            for role in user.roles
        ),
    )


class SqlDirectory(Directory):
    """
    Read-only principal lookup over SQLAlchemy.

    .. note::
       Requires an active Flask app context (Flask-SQLAlchemy session).
    """

    def find_principal_by_username(self, username: str) -> Principal | None:
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            user = uow.users.get_by_username(username)
            if user is None:
                return None
            return to_principal(user)
