"""Role and permission repositories."""

from __future__ import annotations

from identity_service.models.role import Permission, Role
from identity_service.repositories.base import BaseRepository


class RoleRepository(BaseRepository[Role]):
    """Persistence-only repository for :class:`Role`."""

    model = Role

    def get_by_name(self, name: str) -> Role | None:
        return self.first_by(name=name.strip())


class PermissionRepository(BaseRepository[Permission]):
    """Persistence-only repository for :class:`Permission`."""

    model = Permission

    def get_by_name(self, name: str) -> Permission | None:
        return self.first_by(name=name.strip())
