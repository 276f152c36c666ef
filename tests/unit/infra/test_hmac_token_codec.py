"""Unit tests for the PyJWT-backed HS512 token codec."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from identity_service.infra.jwt import ALGORITHM, MIN_KEY_BYTES, HmacTokenCodec
from identity_service.services._shared.errors import ConfigurationError, MalformedTokenError
from identity_service.services._shared.ports import TokenClaims

KEY = "codec-test-key-" + "z" * 64


@pytest.fixture()
def codec() -> HmacTokenCodec:
    return HmacTokenCodec(KEY)


@pytest.fixture()
def claims() -> TokenClaims:
    issued = datetime(2024, 5, 1, 8, 30, tzinfo=UTC)
    return TokenClaims(
        subject="alice",
        issuer="identity-service",
        issued_at=issued,
        expires_at=issued + timedelta(hours=1),
        token_id="8f14e45f-ceea-467a-9575-0e0e3f1c1b53",
        scope="ROLE_ADMIN READ WRITE",
    )


def test_parse_returns_minted_claims(codec, claims):
    parsed = codec.parse(codec.mint(claims))

    assert parsed.signature_valid is True
    assert parsed.claims == claims


def test_wire_format_is_compact_hs512(codec, claims):
    token = codec.mint(claims)

    assert token.count(".") == 2
    header = jwt.get_unverified_header(token)
    assert header["alg"] == ALGORITHM
    payload = jwt.decode(token, options={"verify_signature": False})
    assert payload["sub"] == "alice"
    assert payload["iat"] == int(claims.issued_at.timestamp())
    assert payload["exp"] == int(claims.expires_at.timestamp())
    assert payload["scope"] == "ROLE_ADMIN READ WRITE"


def test_expired_token_still_parses(codec, claims):
    # Expiry is the service's decision, not the codec's.
    past = TokenClaims(
        subject=claims.subject,
        issuer=claims.issuer,
        issued_at=datetime(2000, 1, 1, tzinfo=UTC),
        expires_at=datetime(2000, 1, 1, 1, tzinfo=UTC),
        token_id=claims.token_id,
    )
    parsed = codec.parse(codec.mint(past))

    assert parsed.signature_valid is True
    assert parsed.claims.scope == ""


def test_tampered_payload_has_invalid_signature(codec, claims):
    header, _, signature = codec.mint(claims).split(".")
    forged_payload = jwt.encode(
        {"sub": "mallory", "iss": "x", "iat": 0, "exp": 1, "jti": "j"},
        "another-key-" + "q" * 64,
        algorithm=ALGORITHM,
    ).split(".")[1]

    parsed = codec.parse(".".join([header, forged_payload, signature]))

    assert parsed.signature_valid is False
    assert parsed.claims.subject == "mallory"


def test_token_from_other_key_has_invalid_signature(codec, claims):
    other = HmacTokenCodec("other-key-" + "w" * 64)

    parsed = codec.parse(other.mint(claims))

    assert parsed.signature_valid is False
    assert parsed.claims == claims


def test_foreign_algorithm_is_not_trusted(codec, claims):
    token = jwt.encode(
        {"sub": "alice", "iss": "identity-service", "iat": 0, "exp": 10, "jti": "j-1"},
        KEY,
        algorithm="HS256",
    )

    assert codec.parse(token).signature_valid is False


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_tokens_raise(codec, token):
    with pytest.raises(MalformedTokenError):
        codec.parse(token)


def test_missing_required_claim_raises(codec):
    token = jwt.encode({"sub": "alice", "iat": 0, "exp": 10}, KEY, algorithm=ALGORITHM)

    with pytest.raises(MalformedTokenError):
        codec.parse(token)


def test_non_numeric_date_raises(codec):
    token = jwt.encode(
        {"sub": "alice", "iss": "i", "iat": "yesterday", "exp": 10, "jti": "j"},
        KEY,
        algorithm=ALGORITHM,
    )

    with pytest.raises(MalformedTokenError):
        codec.parse(token)


@pytest.mark.parametrize("key", [None, "", "short"])
def test_unusable_key_is_rejected(key):
    with pytest.raises(ConfigurationError):
        HmacTokenCodec(key)


def test_minimum_key_length_is_accepted():
    HmacTokenCodec(b"k" * MIN_KEY_BYTES)
