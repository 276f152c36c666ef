"""Authorization predicates evaluated by callers against the current principal's claims."""

from __future__ import annotations

from identity_service.services._shared.ports.token_codec import TokenClaims

ROLE_PREFIX = "ROLE_"


def scope_tokens(claims: TokenClaims) -> frozenset[str]:
    """Split a token's scope string into its role/permission tokens."""
    return frozenset(claims.scope.split())


def has_role(claims: TokenClaims, role: str) -> bool:
    """Return True if the principal holds ``role`` (given with or without ``ROLE_``)."""
    name = role if role.startswith(ROLE_PREFIX) else f"{ROLE_PREFIX}{role}"
    return name in scope_tokens(claims)


def has_authority(claims: TokenClaims, authority: str) -> bool:
    """Return True if ``authority`` (a permission or ``ROLE_*`` token) is in scope."""
    return authority in scope_tokens(claims)


def is_owner(*, actor_id, owner_id) -> bool:
    """Return True if the actor owns the resource."""
    return str(actor_id) == str(owner_id)


def is_self_or_admin(claims: TokenClaims, username: str) -> bool:
    """Return True if the principal is ``username`` or holds ``ROLE_ADMIN``."""
    return is_owner(actor_id=claims.subject, owner_id=username) or has_role(claims, "ADMIN")


def is_admin(claims: TokenClaims, **_: object) -> bool:
    """Return True if the principal holds ``ROLE_ADMIN``, whatever the route arguments."""
    return has_role(claims, "ADMIN")
