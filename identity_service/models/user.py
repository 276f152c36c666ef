"""User model: the credential principal looked up during authentication."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Column, ForeignKey, Index, String, Table, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
from werkzeug.security import generate_password_hash

from identity_service.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin
from .role import Role

user_roles = Table(
    "user_roles",
    db.metadata,
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity.

    Fields
    ------
    username : str
        Login name and token subject. Unique per system.
    password_hash : str
        Hashed password (write-only setter via ``password``).
    roles : list[Role]
        Assigned roles, loaded ordered by name.
    """

    __tablename__ = "users"
    __repr_key__ = "username"

    username: Mapped[str] = mapped_column(String(50), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(254), nullable=False)

    roles: Mapped[list[Role]] = relationship(
        secondary=user_roles,
        order_by=Role.name,
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
        Index("ix_users_username", "username"),
    )

    @property
    def password(self) -> Any:
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        """Store a Werkzeug hash of ``raw``; the plaintext is never kept."""
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = generate_password_hash(raw)

    @validates("username")
    def _normalize_username(self, key: str, value: str) -> str:
        username = value.strip() if isinstance(value, str) else ""
        if not username:
            raise ValueError("Username is required.")
        return username
