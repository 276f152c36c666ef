from __future__ import annotations

import threading
from datetime import datetime
from typing import Protocol


class RevocationStore(Protocol):
    """
    Abstraction for the set of revoked token identifiers (``jti``).

    ``insert`` MUST be atomic per key and idempotent: inserting an identifier
    that is already present is a tolerated no-op.
    """

    def exists(self, token_id: str) -> bool: ...

    def insert(self, token_id: str, *, expires_at: datetime) -> bool:
        """
        Record ``token_id`` as revoked until ``expires_at``.

        :returns: ``True`` if newly recorded, ``False`` if it was already present.
        """
        ...


class InMemoryRevocationStore(RevocationStore):
    """Process-local revocation set. Used by unit tests and ``REVOCATION_BACKEND=memory``."""

    def __init__(self) -> None:
        self._revoked: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def exists(self, token_id: str) -> bool:
        # Expired entries are not pruned; retention is handled out of band.
        with self._lock:
            return token_id in self._revoked

    def insert(self, token_id: str, *, expires_at: datetime) -> bool:
        with self._lock:
            if token_id in self._revoked:
                return False
            self._revoked[token_id] = expires_at
            return True

    def expires_at(self, token_id: str) -> datetime | None:
        """Return the recorded expiry for ``token_id`` (test/inspection helper)."""
        with self._lock:
            return self._revoked.get(token_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._revoked)
