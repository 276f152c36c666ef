"""Repository over the ``revoked_tokens`` table."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select

from identity_service.models.revoked_token import RevokedToken
from identity_service.repositories.base import BaseRepository


class RevokedTokenRepository(BaseRepository[RevokedToken]):
    """Persistence-only repository for :class:`RevokedToken`."""

    model = RevokedToken

    def exists(self, token_id: str) -> bool:
        """Return ``True`` when ``token_id`` has a revocation row."""
        stmt = select(RevokedToken.id).where(RevokedToken.id == token_id)
        return bool(self.session.execute(stmt).first())

    def add_entry(self, token_id: str, expires_at: datetime) -> RevokedToken:
        """Stage a revocation row. Duplicates surface as ``IntegrityError`` on flush."""
        return self.add(RevokedToken(id=token_id, expires_at=expires_at))
