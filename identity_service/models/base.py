"""Column mixins shared by the directory and revocation models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column


class TimestampMixin:
    """Database-maintained, timezone-aware ``created_at`` / ``updated_at``."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class PKMixin:
    """Integer surrogate key ``id``; natural keys stay unique columns."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class ReprMixin:
    """
    ``<Class key=value>`` repr.

    Subclasses choose the attribute shown via ``__repr_key__`` (``id`` by
    default), e.g. ``username`` for users so logs stay readable.
    """

    __repr_key__ = "id"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.__repr_key__}={getattr(self, self.__repr_key__, None)}>"
