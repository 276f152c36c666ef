# identity_service/services/users/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class UserRegisterIn:
    """
    Input DTO for self-registration.

    :param username: Login name (surrounding whitespace is dropped).
    :type username: str
    :param password: Raw password; hashed by the model setter.
    :type password: str
    """

    username: str
    password: str


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Public-safe view of a directory user. Never carries the password hash.

    :param id: Primary key.
    :param username: Login name.
    :param roles: Role names in name order.
    :param created_at: Creation instant.
    """

    id: int
    username: str
    roles: tuple[str, ...]
    created_at: datetime | None
