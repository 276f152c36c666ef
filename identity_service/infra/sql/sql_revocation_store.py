"""Revocation store over the ``revoked_tokens`` table."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError

from identity_service.services._shared.ports import RevocationStore
from identity_service.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


class SqlRevocationStore(RevocationStore):
    """
    Durable revocation set backed by SQLAlchemy.

    Each insert runs in its own read-write Unit of Work. The primary key on
    ``revoked_tokens.id`` makes the insert atomic per identifier: a concurrent
    duplicate surfaces as ``IntegrityError`` and is treated as already revoked.

    .. note::
       Requires an active Flask app context (Flask-SQLAlchemy session).
    """

    def exists(self, token_id: str) -> bool:
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            return uow.revoked_tokens.exists(token_id)

    def insert(self, token_id: str, *, expires_at: datetime) -> bool:
        try:
            with SQLAlchemyUnitOfWork() as uow:
                if uow.revoked_tokens.exists(token_id):
                    return False
                uow.revoked_tokens.add_entry(token_id, expires_at)
        except IntegrityError:
            log.debug("revocation entry already present", extra={"jti": token_id})
            return False
        return True
