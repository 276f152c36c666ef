"""Factory Boy definitions for :class:`Role` and :class:`Permission`."""

from __future__ import annotations

import factory

from identity_service.models.role import Permission, Role
from tests.factories import BaseFactory


class PermissionFactory(BaseFactory):
    """Build persisted :class:`identity_service.models.role.Permission`."""

    class Meta:
        model = Permission
        sqlalchemy_get_or_create = ("name",)

    id = None
    name = factory.Sequence(lambda n: f"PERM_{n}")


class RoleFactory(BaseFactory):
    """
    Build persisted :class:`identity_service.models.role.Role`.

    Pass ``permissions=[...]`` with names or :class:`Permission` objects.
    """

    class Meta:
        model = Role
        sqlalchemy_get_or_create = ("name",)

    id = None
    name = factory.Sequence(lambda n: f"ROLE{n}")

    @factory.post_generation
    def permissions(obj, create, extracted, **kwargs):
        for perm in extracted or ():
            if isinstance(perm, str):
                perm = PermissionFactory(name=perm)
            if perm not in obj.permissions:
                obj.permissions.append(perm)
