from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True, slots=True)
class RoleGrant:
    """
    A role assigned to a principal, with its permission names in directory order.

    :ivar name: Role name (e.g. ``ADMIN``).
    :ivar permissions: Permission names granted by the role.
    """

    name: str
    permissions: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Read-only snapshot of a user taken for a single authentication attempt.

    :ivar username: Login name, used as token subject.
    :ivar password_hash: One-way hash of the password.
    :ivar roles: Assigned roles in a stable order.
    """

    username: str
    password_hash: str
    roles: tuple[RoleGrant, ...] = field(default_factory=tuple)


class Directory(Protocol):
    """Read-only lookup of principals by username."""

    def find_principal_by_username(self, username: str) -> Principal | None: ...


class InMemoryDirectory(Directory):
    """
    Dictionary-backed directory for unit tests and local wiring.

    Roles are given as ``{role_name: [permission, ...]}`` mappings and keep
    their insertion order.
    """

    def __init__(self, principals: Iterable[Principal] = ()) -> None:
        self._by_username: dict[str, Principal] = {p.username: p for p in principals}

    def add(
        self,
        username: str,
        password_hash: str,
        roles: Mapping[str, Sequence[str]] | None = None,
    ) -> Principal:
        grants = tuple(RoleGrant(name, tuple(perms)) for name, perms in (roles or {}).items())
        principal = Principal(username=username, password_hash=password_hash, roles=grants)
        self._by_username[username] = principal
        return principal

    def remove(self, username: str) -> None:
        self._by_username.pop(username, None)

    def find_principal_by_username(self, username: str) -> Principal | None:
        return self._by_username.get(username)
