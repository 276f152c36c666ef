from identity_service.services.auth.dto import (
    AuthenticateIn,
    AuthenticationOut,
    AuthTokenConfig,
    IntrospectOut,
    TokenIn,
)
from identity_service.services.auth.service import AuthService, build_scope

__all__ = [
    "AuthService",
    "AuthTokenConfig",
    "AuthenticateIn",
    "AuthenticationOut",
    "IntrospectOut",
    "TokenIn",
    "build_scope",
]
