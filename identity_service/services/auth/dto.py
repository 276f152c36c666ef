# identity_service/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from identity_service.services._shared.errors import ConfigurationError

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthenticateIn:
    """
    Input DTO for credential authentication.

    :param username: Login name.
    :type username: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    username: str
    password: str


@dataclass(frozen=True, slots=True)
class TokenIn:
    """
    Input DTO carrying a compact signed token (introspect, refresh, logout).

    :param token: Encoded token.
    :type token: str
    """

    token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthenticationOut:
    """
    Output DTO for authenticate/refresh.

    :param token: Newly minted token.
    :type token: str
    :param authenticated: Always ``True`` on the success path.
    :type authenticated: bool
    """

    token: str
    authenticated: bool = True


@dataclass(frozen=True, slots=True)
class IntrospectOut:
    """
    Output DTO for introspection.

    :param valid: Whether the token passes full (non-refresh) verification.
    :type valid: bool
    """

    valid: bool


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration, loaded once at startup.

    :param valid_duration: Normal validity window measured from issuance.
    :type valid_duration: timedelta
    :param refreshable_duration: Refresh grace window measured from issuance.
    :type refreshable_duration: timedelta
    :param issuer: Fixed ``iss`` claim.
    :type issuer: str
    """

    valid_duration: timedelta
    refreshable_duration: timedelta
    issuer: str = "identity-service"

    def __post_init__(self) -> None:
        if self.valid_duration <= timedelta(0):
            raise ConfigurationError("valid_duration must be positive.")
        if self.refreshable_duration < self.valid_duration:
            raise ConfigurationError("refreshable_duration must not be shorter than valid_duration.")
        if not self.issuer:
            raise ConfigurationError("issuer is required.")

    @classmethod
    def from_seconds(
        cls, *, valid: int, refreshable: int, issuer: str = "identity-service"
    ) -> AuthTokenConfig:
        """Build a config from integer second counts (as stored in app config)."""
        return cls(
            valid_duration=timedelta(seconds=valid),
            refreshable_duration=timedelta(seconds=refreshable),
            issuer=issuer,
        )
