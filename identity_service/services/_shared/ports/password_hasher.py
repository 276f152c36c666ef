from __future__ import annotations

from typing import Protocol

from werkzeug.security import check_password_hash, generate_password_hash


class PasswordHasher(Protocol):
    """One-way password hashing primitive."""

    def hash(self, plaintext: str) -> str: ...

    def verify(self, plaintext: str, hashed: str) -> bool: ...


class WerkzeugPasswordHasher(PasswordHasher):
    """Werkzeug's salted hashes (``scrypt`` by default), same as :class:`User.password`."""

    def hash(self, plaintext: str) -> str:
        return generate_password_hash(plaintext)

    def verify(self, plaintext: str, hashed: str) -> bool:
        if not hashed:
            return False
        # check_password_hash raises on hashes it cannot parse; treat as mismatch.
        try:
            return bool(check_password_hash(hashed, plaintext))
        except ValueError:
            return False
