"""
Errors raised by the authentication service and its ports.

Nothing here imports Flask, HTTP or SQLAlchemy: adapters raise these, the
service propagates them, and ``BaseService.translate_exceptions()`` turns them
into problem responses at the HTTP edge.
"""

from __future__ import annotations

from dataclasses import dataclass


class ServiceError(Exception):
    """Root of the service error hierarchy; never an HTTP error by itself."""


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when a principal (or other entity) is not found.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


class UnauthenticatedError(ServiceError):
    """
    Raised for bad credentials, bad signatures, expired or revoked tokens.

    The string form is always ``"Unauthenticated"`` so no token or claim
    detail reaches callers; ``reason`` is for logs only.

    :param reason: Internal, log-only explanation.
    :type reason: str
    """

    def __init__(self, reason: str = "unauthenticated") -> None:
        super().__init__("Unauthenticated")
        self.reason = reason

    def __str__(self) -> str:
        return "Unauthenticated"


class MalformedTokenError(UnauthenticatedError):
    """Raised when a token cannot be decoded into a claim set at all."""


class ConfigurationError(ServiceError):
    """
    Raised when process-wide configuration is unusable (e.g. signing key).

    Not recoverable: the process should refuse to start.
    """


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "Role").
    :param detail: Short human-readable explanation.
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"
