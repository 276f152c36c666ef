"""RevokedToken model: identifiers of tokens that must no longer verify."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from identity_service.core.extensions import db

from .base import ReprMixin


class RevokedToken(ReprMixin, db.Model):
    """
    One row per revoked token identifier (``jti``).

    ``expires_at`` is the last instant the token could still pass any
    verification mode; rows past it carry no information and may be pruned.
    """

    __tablename__ = "revoked_tokens"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
