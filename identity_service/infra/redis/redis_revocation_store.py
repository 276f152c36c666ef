from datetime import UTC, datetime
from typing import cast

import redis

from identity_service.services._shared.ports import RevocationStore


class RedisRevocationStore(RevocationStore):
    """
    Revoked token identifiers kept as Redis keys with a TTL.

    Keys expire on their own once the token can no longer verify, so no
    retention sweep is needed for this backend.
    """

    def __init__(self, r: redis.Redis, *, prefix: str = "revoked:jti:"):
        self.r = r
        self.prefix = prefix

    def _k(self, token_id: str) -> str:
        return f"{self.prefix}{token_id}"

    def exists(self, token_id: str) -> bool:
        return cast(int, self.r.exists(self._k(token_id))) == 1

    def insert(self, token_id: str, *, expires_at: datetime) -> bool:
        now = datetime.now(UTC).timestamp()
        ttl = max(1, int(expires_at.timestamp() - now))
        # SET NX: atomic check-and-insert; a second insert of the same jti is a no-op
        return bool(self.r.set(self._k(token_id), "1", ex=ttl, nx=True))

    def ttl(self, token_id: str) -> int:
        """Remaining lifetime of the entry in seconds (-2 when absent)."""
        return cast(int, self.r.ttl(self._k(token_id)))
