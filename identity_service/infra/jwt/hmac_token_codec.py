# identity_service/infra/jwt/hmac_token_codec.py
from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import jwt

from identity_service.services._shared.errors import ConfigurationError, MalformedTokenError
from identity_service.services._shared.ports import ParsedToken, TokenClaims, TokenCodec

ALGORITHM = "HS512"
# HS512 keys shorter than the SHA-512 block are rejected at startup.
MIN_KEY_BYTES = 64

_REQUIRED_CLAIMS = ["sub", "iss", "iat", "exp", "jti"]

# Expiry, issuance and audience are judged by the service, not the codec.
_DECODE_OPTIONS: dict[str, Any] = {
    "verify_exp": False,
    "verify_iat": False,
    "verify_nbf": False,
    "verify_aud": False,
    "verify_iss": False,
    "require": _REQUIRED_CLAIMS,
}


class HmacTokenCodec(TokenCodec):
    """
    HS512 JWS codec built on PyJWT.

    Wire form is the compact serialization ``header.claims.signature``, each
    segment base64url encoded. Timestamps are NumericDate seconds, so claim
    datetimes must carry whole seconds to round-trip exactly.

    .. note::
       The key is fixed for the lifetime of the instance (no rotation).
    """

    def __init__(self, signer_key: str | bytes | None) -> None:
        """
        :param signer_key: Shared secret, at least 64 bytes.
        :raises ConfigurationError: If the key is absent or too short.
        """
        if not signer_key:
            raise ConfigurationError("Token signer key is not configured.")
        key = signer_key.encode("utf-8") if isinstance(signer_key, str) else bytes(signer_key)
        if len(key) < MIN_KEY_BYTES:
            raise ConfigurationError(
                f"Token signer key must be at least {MIN_KEY_BYTES} bytes for {ALGORITHM}."
            )
        self._key = key

    def mint(self, claims: TokenClaims) -> str:
        payload = {
            "sub": claims.subject,
            "iss": claims.issuer,
            "iat": _to_epoch(claims.issued_at),
            "exp": _to_epoch(claims.expires_at),
            "jti": claims.token_id,
            "scope": claims.scope,
        }
        return jwt.encode(payload, self._key, algorithm=ALGORITHM)

    def parse(self, token: str) -> ParsedToken:
        """
        Decode ``token`` and check its signature.

        A wrong signature or a foreign ``alg`` header yields
        ``signature_valid=False`` together with the unverified claims.

        :raises MalformedTokenError: If the token cannot be decoded into claims.
        """
        if not isinstance(token, str) or not token:
            raise MalformedTokenError("empty token")
        try:
            payload = jwt.decode(token, self._key, algorithms=[ALGORITHM], options=_DECODE_OPTIONS)
            signature_valid = True
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError):
            payload = self._decode_unverified(token)
            signature_valid = False
        except jwt.PyJWTError as exc:
            raise MalformedTokenError(f"undecodable token: {type(exc).__name__}") from exc

        return ParsedToken(claims=_claims_from_payload(payload), signature_valid=signature_valid)

    @staticmethod
    def _decode_unverified(token: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                options={**_DECODE_OPTIONS, "verify_signature": False},
            )
        except jwt.PyJWTError as exc:
            raise MalformedTokenError(f"undecodable token: {type(exc).__name__}") from exc


def _to_epoch(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return int(value.timestamp())


def _from_epoch(value: Any, claim: str) -> datetime:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise MalformedTokenError(f"claim {claim!r} is not a NumericDate")
    return datetime.fromtimestamp(int(value), tz=UTC)


def _claims_from_payload(payload: dict[str, Any]) -> TokenClaims:
    subject = payload.get("sub")
    token_id = payload.get("jti")
    if not isinstance(subject, str) or not subject:
        raise MalformedTokenError("claim 'sub' is missing")
    if not isinstance(token_id, str) or not token_id:
        raise MalformedTokenError("claim 'jti' is missing")
    scope = payload.get("scope") or ""
    if not isinstance(scope, str):
        raise MalformedTokenError("claim 'scope' is not a string")
    return TokenClaims(
        subject=subject,
        issuer=str(payload.get("iss", "")),
        issued_at=_from_epoch(payload.get("iat"), "iat"),
        expires_at=_from_epoch(payload.get("exp"), "exp"),
        token_id=token_id,
        scope=scope,
    )
