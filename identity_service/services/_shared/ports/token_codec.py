from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Claim set carried by a session token.

    :ivar subject: Username of the principal (``sub``).
    :ivar issuer: Fixed issuer string (``iss``).
    :ivar issued_at: Issuance instant, aware UTC, whole seconds (``iat``).
    :ivar expires_at: End of normal validity, aware UTC, whole seconds (``exp``).
    :ivar token_id: Unique random identifier (``jti``).
    :ivar scope: Space-joined role/permission names (``scope``).
    """

    subject: str
    issuer: str
    issued_at: datetime
    expires_at: datetime
    token_id: str
    scope: str = ""


@dataclass(frozen=True, slots=True)
class ParsedToken:
    """Result of decoding a token: its claims and whether the signature matched."""

    claims: TokenClaims
    signature_valid: bool


class TokenCodec(Protocol):
    """
    Port for encoding claim sets into signed compact tokens and back.

    ``parse`` only checks integrity; expiry and revocation are decided by the
    caller so different expiry policies can share one decode path.
    """

    def mint(self, claims: TokenClaims) -> str: ...

    def parse(self, token: str) -> ParsedToken: ...
