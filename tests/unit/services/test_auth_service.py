# tests/unit/services/test_auth_service.py
from __future__ import annotations

from datetime import timedelta

import pytest

from identity_service.infra.jwt import HmacTokenCodec
from identity_service.services._shared.errors import (
    ConfigurationError,
    MalformedTokenError,
    NotFoundError,
    UnauthenticatedError,
)
from identity_service.services._shared.ports import (
    InMemoryDirectory,
    InMemoryRevocationStore,
    Principal,
    RoleGrant,
)
from identity_service.services.auth import (
    AuthenticateIn,
    AuthenticationOut,
    AuthService,
    AuthTokenConfig,
    TokenIn,
    build_scope,
)
from tests.helpers.utils import FrozenClock, fast_hash

KEY = "engine-test-key-" + "x" * 64


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture()
def directory() -> InMemoryDirectory:
    directory = InMemoryDirectory()
    directory.add("alice", fast_hash("hunter2"), {"ADMIN": ["READ", "WRITE"]})
    directory.add("bob", fast_hash("s3cret"))
    return directory


@pytest.fixture()
def store() -> InMemoryRevocationStore:
    return InMemoryRevocationStore()


@pytest.fixture()
def codec() -> HmacTokenCodec:
    return HmacTokenCodec(KEY)


def _service(directory, store, codec, clock, *, valid=3600, refreshable=36000) -> AuthService:
    return AuthService(
        directory=directory,
        revocation_store=store,
        token_codec=codec,
        token_cfg=AuthTokenConfig.from_seconds(valid=valid, refreshable=refreshable),
        clock=clock,
    )


@pytest.fixture()
def service(directory, store, codec, clock) -> AuthService:
    """AuthService wired to in-memory doubles, the real codec and a frozen clock."""
    return _service(directory, store, codec, clock)


def _login(service: AuthService, username="alice", password="hunter2") -> str:
    return service.authenticate(AuthenticateIn(username=username, password=password)).token


# ------------------------------ Authenticate ------------------------------ #
class TestAuthenticate:
    def test_returns_token_that_introspects_valid(self, service):
        out = service.authenticate(AuthenticateIn(username="alice", password="hunter2"))

        assert isinstance(out, AuthenticationOut)
        assert out.authenticated is True
        assert service.introspect(TokenIn(out.token)).valid is True

    def test_token_claims(self, service, codec, clock):
        token = _login(service)

        parsed = codec.parse(token)
        assert parsed.signature_valid is True
        claims = parsed.claims
        assert claims.subject == "alice"
        assert claims.issuer == "identity-service"
        assert claims.issued_at == clock.now
        assert claims.expires_at == clock.now + timedelta(seconds=3600)
        assert claims.scope == "ROLE_ADMIN READ WRITE"
        assert claims.token_id

    def test_each_token_gets_a_fresh_identifier(self, service, codec):
        first = codec.parse(_login(service)).claims.token_id
        second = codec.parse(_login(service)).claims.token_id
        assert first != second

    def test_wrong_password_is_unauthenticated_and_writes_nothing(self, service, store):
        with pytest.raises(UnauthenticatedError) as excinfo:
            service.authenticate(AuthenticateIn(username="alice", password="wrong"))

        assert str(excinfo.value) == "Unauthenticated"
        assert len(store) == 0

    def test_unknown_user_is_not_found(self, service, store):
        with pytest.raises(NotFoundError) as excinfo:
            service.authenticate(AuthenticateIn(username="mallory", password="x"))

        assert excinfo.value.key == "mallory"
        assert len(store) == 0


# ------------------------------ Scope ------------------------------------- #
class TestScope:
    def test_role_followed_by_its_permissions(self):
        principal = Principal("alice", "h", (RoleGrant("ADMIN", ("READ", "WRITE")),))
        assert build_scope(principal) == "ROLE_ADMIN READ WRITE"

    def test_no_roles_gives_empty_scope(self):
        assert build_scope(Principal("bob", "h")) == ""

    def test_multiple_roles_keep_directory_order(self):
        principal = Principal(
            "carol",
            "h",
            (RoleGrant("USER", ("READ",)), RoleGrant("AUDITOR", ())),
        )
        assert build_scope(principal) == "ROLE_USER READ ROLE_AUDITOR"

    def test_scope_of_reports_current_directory_state(self, service):
        assert service.scope_of("alice") == "ROLE_ADMIN READ WRITE"
        assert service.scope_of("bob") == ""

    def test_scope_of_unknown_user(self, service):
        with pytest.raises(NotFoundError):
            service.scope_of("nobody")


# ------------------------------ Introspect -------------------------------- #
class TestIntrospect:
    def test_false_at_and_after_expiry(self, service, clock):
        token = _login(service)

        clock.advance(seconds=3599)
        assert service.introspect(TokenIn(token)).valid is True
        clock.advance(seconds=1)
        assert service.introspect(TokenIn(token)).valid is False

    def test_false_for_garbage(self, service):
        assert service.introspect(TokenIn("not-a-token")).valid is False
        assert service.introspect(TokenIn("")).valid is False

    def test_false_for_token_signed_with_another_key(self, directory, store, clock, service):
        foreign = _service(directory, store, HmacTokenCodec("other-key-" + "y" * 64), clock)
        token = _login(foreign)

        assert service.introspect(TokenIn(token)).valid is False

    def test_false_when_store_fails(self, service, monkeypatch, caplog):
        token = _login(service)

        def _boom(token_id):
            raise ConnectionError("store down")

        monkeypatch.setattr(service.revocations, "exists", _boom)

        assert service.introspect(TokenIn(token)).valid is False
        assert "introspection failed unexpectedly" in caplog.text


# ------------------------------ Verify ------------------------------------ #
class TestVerify:
    def test_returns_claims(self, service):
        claims = service.verify(_login(service))
        assert claims.subject == "alice"

    def test_refresh_mode_uses_grace_window(self, service, clock):
        token = _login(service)
        clock.advance(seconds=3600 * 5)

        with pytest.raises(UnauthenticatedError):
            service.verify(token)
        assert service.verify(token, refresh=True).subject == "alice"

    def test_refresh_mode_rejects_after_grace_window(self, service, clock):
        token = _login(service)
        clock.advance(seconds=36000)

        with pytest.raises(UnauthenticatedError):
            service.verify(token, refresh=True)

    def test_malformed_token_is_unauthenticated(self, service):
        with pytest.raises(MalformedTokenError):
            service.verify("a.b.c")


# ------------------------------ Logout ------------------------------------ #
class TestLogout:
    def test_logout_revokes(self, service, store, codec):
        token = _login(service)
        assert service.introspect(TokenIn(token)).valid is True

        service.logout(TokenIn(token))

        assert service.introspect(TokenIn(token)).valid is False
        assert store.exists(codec.parse(token).claims.token_id)

    def test_logout_is_idempotent(self, service, store):
        token = _login(service)

        service.logout(TokenIn(token))
        service.logout(TokenIn(token))

        assert len(store) == 1

    def test_logout_of_garbage_is_silent(self, service, store):
        service.logout(TokenIn("garbage"))
        assert len(store) == 0

    def test_logout_within_grace_window_still_revokes(self, service, store, clock):
        token = _login(service)
        clock.advance(seconds=7200)  # past exp, inside the refresh window

        service.logout(TokenIn(token))

        assert len(store) == 1
        with pytest.raises(UnauthenticatedError):
            service.refresh(TokenIn(token))

    def test_revocation_lasts_until_refresh_window_closes(self, service, store, codec, clock):
        token = _login(service)
        claims = codec.parse(token).claims

        service.logout(TokenIn(token))

        assert store.expires_at(claims.token_id) == claims.issued_at + timedelta(seconds=36000)


# ------------------------------ Refresh ----------------------------------- #
class TestRefresh:
    def test_refresh_mints_new_token_and_revokes_old(self, service, codec):
        token = _login(service)

        new = service.refresh(TokenIn(token)).token

        assert new != token
        assert codec.parse(new).claims.token_id != codec.parse(token).claims.token_id
        assert service.introspect(TokenIn(new)).valid is True
        assert service.introspect(TokenIn(token)).valid is False

    def test_second_refresh_of_same_token_fails(self, service):
        token = _login(service)
        service.refresh(TokenIn(token))

        with pytest.raises(UnauthenticatedError):
            service.refresh(TokenIn(token))

    def test_refresh_inside_grace_window(self, directory, store, codec, clock):
        service = _service(directory, store, codec, clock, valid=60, refreshable=7200)
        token = _login(service)

        clock.advance(seconds=90)

        new = service.refresh(TokenIn(token)).token
        assert service.introspect(TokenIn(new)).valid is True
        assert service.introspect(TokenIn(token)).valid is False

    def test_refresh_picks_up_directory_changes(self, service, directory, codec):
        token = _login(service, "bob", "s3cret")
        directory.add("bob", fast_hash("s3cret"), {"USER": ["READ"]})

        new = service.refresh(TokenIn(token)).token

        assert codec.parse(new).claims.scope == "ROLE_USER READ"

    def test_refresh_fails_if_principal_deleted(self, service, directory, store):
        token = _login(service)
        directory.remove("alice")

        with pytest.raises(UnauthenticatedError):
            service.refresh(TokenIn(token))
        # The presented token was revoked before the lookup failed.
        assert len(store) == 1

    def test_refresh_of_revoked_token_fails(self, service):
        token = _login(service)
        service.logout(TokenIn(token))

        with pytest.raises(UnauthenticatedError):
            service.refresh(TokenIn(token))


# ------------------------------ Config ------------------------------------ #
class TestAuthTokenConfig:
    def test_rejects_non_positive_validity(self):
        with pytest.raises(ConfigurationError):
            AuthTokenConfig.from_seconds(valid=0, refreshable=10)

    def test_rejects_refresh_window_shorter_than_validity(self):
        with pytest.raises(ConfigurationError):
            AuthTokenConfig.from_seconds(valid=60, refreshable=30)

    def test_rejects_empty_issuer(self):
        with pytest.raises(ConfigurationError):
            AuthTokenConfig.from_seconds(valid=60, refreshable=60, issuer="")
