"""Tiny helpers shared across test modules."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from werkzeug.security import generate_password_hash

# Low-cost hash method: tests verify behaviour, not hash strength.
FAST_HASH_METHOD = "pbkdf2:sha256:1000"


def fast_hash(password: str) -> str:
    """Hash ``password`` with a cheap Werkzeug method for in-memory directories."""
    return generate_password_hash(password, method=FAST_HASH_METHOD)


class FrozenClock:
    """Callable clock returning a fixed, manually advanced aware UTC instant."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        """Move the clock forward by ``timedelta(**delta)``."""
        self.now = self.now + timedelta(**delta)
        return self.now
