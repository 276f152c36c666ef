"""Marshmallow schemas for request validation and response shaping."""

from __future__ import annotations

from .auth import (
    AuthenticationResponseSchema,
    AuthenticationSchema,
    CurrentPrincipalSchema,
    IntrospectResponseSchema,
    PrincipalScopeSchema,
    TokenSchema,
)
from .user import UserCreateSchema, UserSchema

__all__ = [
    "AuthenticationResponseSchema",
    "AuthenticationSchema",
    "CurrentPrincipalSchema",
    "IntrospectResponseSchema",
    "PrincipalScopeSchema",
    "TokenSchema",
    "UserCreateSchema",
    "UserSchema",
]
