"""
identity_service.services._shared.ports
=======================================

Collection of *ports* (hexagonal interfaces) that define the contracts the
authentication service depends on.

Modules
-------
- :mod:`token_codec`:
    Defines :class:`~.TokenCodec`, :class:`~.TokenClaims` and
    :class:`~.ParsedToken`, the signed-token encode/decode contract.

- :mod:`revocation_store`:
    Defines :class:`~.RevocationStore`, the set of revoked token identifiers.

- :mod:`directory`:
    Defines :class:`~.Directory`, :class:`~.Principal` and
    :class:`~.RoleGrant`, the read-only principal lookup.

- :mod:`password_hasher`:
    Defines :class:`~.PasswordHasher`, the one-way hash/verify primitive.

Design Notes
------------
All these ports follow the *Dependency Inversion Principle* to keep the
service layer independent from implementation details. Concrete adapters
(Redis, SQL, PyJWT) live under ``identity_service.infra``; in-memory
implementations live beside their port for tests and local wiring.
"""

from __future__ import annotations

from .directory import Directory, InMemoryDirectory, Principal, RoleGrant
from .password_hasher import PasswordHasher, WerkzeugPasswordHasher
from .revocation_store import InMemoryRevocationStore, RevocationStore
from .token_codec import ParsedToken, TokenClaims, TokenCodec

__all__ = [
    "Directory",
    "InMemoryDirectory",
    "InMemoryRevocationStore",
    "ParsedToken",
    "PasswordHasher",
    "Principal",
    "RevocationStore",
    "RoleGrant",
    "TokenClaims",
    "TokenCodec",
    "WerkzeugPasswordHasher",
]
