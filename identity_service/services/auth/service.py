# identity_service/services/auth/service.py
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import uuid4

from identity_service.services._shared.base import BaseService
from identity_service.services._shared.errors import (
    NotFoundError,
    ServiceError,
    UnauthenticatedError,
)
from identity_service.services._shared.ports.directory import Directory, Principal
from identity_service.services._shared.ports.password_hasher import (
    PasswordHasher,
    WerkzeugPasswordHasher,
)
from identity_service.services._shared.ports.revocation_store import RevocationStore
from identity_service.services._shared.ports.token_codec import TokenClaims, TokenCodec
from identity_service.services.auth.dto import (
    AuthenticateIn,
    AuthenticationOut,
    AuthTokenConfig,
    IntrospectOut,
    TokenIn,
)

log = logging.getLogger(__name__)

ROLE_PREFIX = "ROLE_"


def utc_now() -> datetime:
    return datetime.now(UTC)


def build_scope(principal: Principal) -> str:
    """
    Encode a principal's roles and permissions as a scope string.

    For each role in directory order: ``ROLE_<name>`` followed by the role's
    permission names. Tokens are joined by a single space; no roles yields
    ``""``.
    """
    parts: list[str] = []
    for role in principal.roles:
        parts.append(f"{ROLE_PREFIX}{role.name}")
        parts.extend(role.permissions)
    return " ".join(parts)


class AuthService(BaseService):
    """
    Session token lifecycle service (authenticate / introspect / refresh / logout).

    Tokens move through ``MINTED -> ACTIVE | EXPIRED -> REVOKED``. The service
    keeps no state of its own: principals come from the :class:`Directory`,
    revocations live in the :class:`RevocationStore`, and signing is delegated
    to the :class:`TokenCodec`.

    Two expiry rules share one decode path:

    - normal mode accepts a token until its ``exp`` claim;
    - refresh mode accepts it until ``iat + refreshable_duration``, a longer
      grace window in which the token may only be refreshed or logged out.
    """

    def __init__(
        self,
        *,
        directory: Directory,
        revocation_store: RevocationStore,
        token_codec: TokenCodec,
        token_cfg: AuthTokenConfig,
        password_hasher: PasswordHasher | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize the service with its collaborators.

        :param directory: Read-only principal lookup.
        :param revocation_store: Set of revoked token identifiers.
        :param token_codec: Signed-token encoder/decoder.
        :param token_cfg: Validity/refresh windows and issuer.
        :param password_hasher: One-way verify primitive (Werkzeug by default).
        :param clock: Returns the current aware UTC instant.
        """
        super().__init__()
        self.directory = directory
        self.revocations = revocation_store
        self.codec = token_codec
        self.cfg = token_cfg
        self.hasher = password_hasher or WerkzeugPasswordHasher()
        self.clock = clock or utc_now

    # ------------------------------------------------------------------ #
    # Authenticate
    # ------------------------------------------------------------------ #

    def authenticate(self, dto: AuthenticateIn) -> AuthenticationOut:
        """
        Check credentials and mint a token.

        :raises NotFoundError: If no principal has this username.
        :raises UnauthenticatedError: If the password does not match.
        """
        principal = self.directory.find_principal_by_username(dto.username)
        if principal is None:
            raise NotFoundError("User", dto.username)

        if not self.hasher.verify(dto.password, principal.password_hash):
            log.info("authentication failed", extra={"subject": dto.username, "reason": "password"})
            raise UnauthenticatedError("password mismatch")

        return AuthenticationOut(token=self._mint_for(principal))

    # ------------------------------------------------------------------ #
    # Introspect (never raises)
    # ------------------------------------------------------------------ #

    def introspect(self, dto: TokenIn) -> IntrospectOut:
        """Answer whether ``dto.token`` is currently usable. Never raises."""
        try:
            self.verify(dto.token)
        except ServiceError:
            return IntrospectOut(valid=False)
        except Exception:
            # Backend failure (store unreachable ...): fail closed.
            log.exception("introspection failed unexpectedly")
            return IntrospectOut(valid=False)
        return IntrospectOut(valid=True)

    # ------------------------------------------------------------------ #
    # Verify
    # ------------------------------------------------------------------ #

    def verify(self, token: str, *, refresh: bool = False) -> TokenClaims:
        """
        Fully verify a token and return its claims.

        :param token: Compact signed token.
        :param refresh: Use the refresh grace window instead of ``exp``.
        :raises UnauthenticatedError: On bad signature, expiry or revocation.
        """
        parsed = self.codec.parse(token)
        claims = parsed.claims
        if not parsed.signature_valid:
            raise self._reject(claims, "bad signature")

        effective_expiry = (
            claims.issued_at + self.cfg.refreshable_duration if refresh else claims.expires_at
        )
        if self.clock() >= effective_expiry:
            raise self._reject(claims, "refresh window elapsed" if refresh else "expired")

        if self.revocations.exists(claims.token_id):
            raise self._reject(claims, "revoked")

        return claims

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: TokenIn) -> None:
        """
        Revoke the presented token. Idempotent; never surfaces an error.

        Uses the refresh window, so a token past ``exp`` but still refreshable
        can be revoked explicitly.
        """
        try:
            claims = self.verify(dto.token, refresh=True)
        except UnauthenticatedError as exc:
            log.info("logout of an unusable token ignored", extra={"reason": exc.reason})
            return
        self._revoke(claims)

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh(self, dto: TokenIn) -> AuthenticationOut:
        """
        Exchange a token (still inside its refresh window) for a fresh one.

        The presented token is revoked before the new one is minted.

        :raises UnauthenticatedError: If the token fails refresh-mode
            verification or its principal no longer exists.
        """
        claims = self.verify(dto.token, refresh=True)
        self._revoke(claims)

        principal = self.directory.find_principal_by_username(claims.subject)
        if principal is None:
            raise UnauthenticatedError("principal no longer exists")

        return AuthenticationOut(token=self._mint_for(principal))

    # ------------------------------------------------------------------ #
    # Scope lookup
    # ------------------------------------------------------------------ #

    def scope_of(self, username: str) -> str:
        """
        Return the scope string a token minted now for ``username`` would carry.

        :raises NotFoundError: If no principal has this username.
        """
        principal = self.directory.find_principal_by_username(username)
        if principal is None:
            raise NotFoundError("User", username)
        return build_scope(principal)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _mint_for(self, principal: Principal) -> str:
        issued_at = self.clock().replace(microsecond=0)
        claims = TokenClaims(
            subject=principal.username,
            issuer=self.cfg.issuer,
            issued_at=issued_at,
            expires_at=issued_at + self.cfg.valid_duration,
            token_id=str(uuid4()),
            scope=build_scope(principal),
        )
        token = self.codec.mint(claims)
        log.info("token issued", extra={"subject": claims.subject, "jti": claims.token_id})
        return token

    def _revoke(self, claims: TokenClaims) -> None:
        # Keep the entry for as long as any verification mode could accept the token.
        expires_at = max(claims.expires_at, claims.issued_at + self.cfg.refreshable_duration)
        if self.revocations.insert(claims.token_id, expires_at=expires_at):
            log.info("token revoked", extra={"subject": claims.subject, "jti": claims.token_id})

    @staticmethod
    def _reject(claims: TokenClaims, reason: str) -> UnauthenticatedError:
        log.info("token rejected", extra={"jti": claims.token_id, "reason": reason})
        return UnauthenticatedError(reason)
