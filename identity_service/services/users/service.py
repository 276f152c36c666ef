# identity_service/services/users/service.py
from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.exc import IntegrityError

from identity_service.models.role import Role
from identity_service.models.user import User
from identity_service.services._shared.base import BaseService, ServiceContext
from identity_service.services._shared.errors import ConflictError, NotFoundError
from identity_service.services.users.dto import UserPublicOut, UserRegisterIn
from identity_service.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork, UnitOfWork

log = logging.getLogger(__name__)

DEFAULT_ROLE = "USER"


def to_public(user: User) -> UserPublicOut:
    return UserPublicOut(
        id=user.id,
        username=user.username,
        roles=tuple(role.name for role in user.roles),
        created_at=user.created_at,
    )


class UserService(BaseService):
    """
    Directory management: registration, listing, lookup and removal of users.

    Authorization is decided by the caller; this service only enforces
    directory rules (unique usernames, the default role on registration).
    """

    def __init__(
        self,
        *,
        default_role: str = DEFAULT_ROLE,
        rw_uow: Callable[[], UnitOfWork] = SQLAlchemyUnitOfWork,
        ro_uow: Callable[[], UnitOfWork] = SQLAlchemyReadOnlyUnitOfWork,
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(ctx=ctx)
        self.default_role = default_role
        self.rw_uow = rw_uow
        self.ro_uow = ro_uow

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def register(self, dto: UserRegisterIn) -> UserPublicOut:
        """
        Create a user holding the default role.

        The role is created on first use so a fresh directory can accept
        registrations before any seeding.

        :raises ConflictError: If the username is already taken.
        """
        try:
            with self.rw_uow() as uow:
                if uow.users.exists_by_username(dto.username):
                    raise ConflictError("User", "username already in use")

                role = uow.roles.get_by_name(self.default_role)
                if role is None:
                    role = uow.roles.add(Role(name=self.default_role))

                user = User(username=dto.username, password=dto.password)
                user.roles.append(role)
                uow.users.add(user)
                out = to_public(user)
        except IntegrityError as exc:
            # Lost a race with a concurrent registration of the same name.
            raise ConflictError("User", "username already in use") from exc

        log.info("user registered", extra=self.log_extra(subject=out.username))
        return out

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def list_users(self) -> list[UserPublicOut]:
        """Every user, ordered by username."""
        with self.ro_uow() as uow:
            return [to_public(user) for user in uow.users.list_ordered()]

    def get_user(self, username: str) -> UserPublicOut:
        """
        :raises NotFoundError: If no user has this username.
        """
        with self.ro_uow() as uow:
            user = uow.users.get_by_username(username)
            if user is None:
                raise NotFoundError("User", username)
            return to_public(user)

    # ------------------------------------------------------------------ #
    # Removal
    # ------------------------------------------------------------------ #

    def delete_user(self, username: str) -> None:
        """
        Remove a user. Tokens already issued stay valid until they expire,
        but can no longer be refreshed.

        :raises NotFoundError: If no user has this username.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_by_username(username)
            if user is None:
                raise NotFoundError("User", username)
            uow.users.delete(user)

        log.info("user deleted", extra=self.log_extra(subject=username))
