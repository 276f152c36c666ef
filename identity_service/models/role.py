"""Role and permission models backing the scope string of issued tokens."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, String, Table, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from identity_service.core.extensions import db

from .base import PKMixin, ReprMixin

role_permissions = Table(
    "role_permissions",
    db.metadata,
    Column("role_id", ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
)


class Permission(PKMixin, ReprMixin, db.Model):
    """A named authority (e.g. ``READ``) granted through roles."""

    __tablename__ = "permissions"
    __repr_key__ = "name"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)

    __table_args__ = (UniqueConstraint("name", name="uq_permissions_name"),)

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        return _normalize_authority(value, what="Permission")


class Role(PKMixin, ReprMixin, db.Model):
    """
    A named bundle of permissions.

    Permissions are loaded ordered by name so the scope string built from a
    role is deterministic across lookups.
    """

    __tablename__ = "roles"
    __repr_key__ = "name"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)

    permissions: Mapped[list[Permission]] = relationship(
        secondary=role_permissions,
        order_by=Permission.name,
        lazy="selectin",
    )

    __table_args__ = (UniqueConstraint("name", name="uq_roles_name"),)

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        return _normalize_authority(value, what="Role")


def _normalize_authority(value: str, *, what: str) -> str:
    """
    Validate a role/permission name.

    Names become whitespace-separated scope tokens, so they may not be empty
    or contain whitespace.

    :raises ValueError: If the name is empty or contains whitespace.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{what} name is required.")
    v = value.strip()
    if any(ch.isspace() for ch in v):
        raise ValueError(f"{what} name must not contain whitespace.")
    return v
