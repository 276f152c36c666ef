"""Repository package exposing persistence-layer access for directory and revocation models."""

from __future__ import annotations

from identity_service.repositories.base import BaseRepository
from identity_service.repositories.revoked_token import RevokedTokenRepository
from identity_service.repositories.role import PermissionRepository, RoleRepository
from identity_service.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "PermissionRepository",
    "RevokedTokenRepository",
    "RoleRepository",
    "UserRepository",
]
