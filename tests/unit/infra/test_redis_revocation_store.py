# tests/unit/infra/test_redis_revocation_store.py
"""
Unit tests for RedisRevocationStore using fakeredis.

They use fakeredis.FakeRedis so they run entirely in-memory and integrate with pytest.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import fakeredis
import pytest

from identity_service.infra.redis import RedisRevocationStore


def _now() -> datetime:
    """Return a timezone-aware UTC "now"."""
    return datetime.now(UTC)


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def store(fake_redis):
    """Provide a RedisRevocationStore backed by FakeRedis."""
    return RedisRevocationStore(r=fake_redis)


def test_insert_then_exists(store):
    assert store.exists("jti-1") is False

    assert store.insert("jti-1", expires_at=_now() + timedelta(minutes=5)) is True

    assert store.exists("jti-1") is True
    assert store.exists("jti-2") is False


def test_duplicate_insert_is_noop(store):
    expires = _now() + timedelta(minutes=5)

    assert store.insert("jti-1", expires_at=expires) is True
    assert store.insert("jti-1", expires_at=expires + timedelta(hours=1)) is False

    # The first entry's TTL is kept.
    assert store.ttl("jti-1") <= 300


def test_entry_ttl_follows_expiry(store):
    store.insert("jti-1", expires_at=_now() + timedelta(hours=10))

    ttl = store.ttl("jti-1")
    assert 36000 - 5 <= ttl <= 36000


def test_past_expiry_still_records_entry(store):
    # Minimum TTL of one second keeps the insert meaningful.
    assert store.insert("jti-1", expires_at=_now() - timedelta(seconds=30)) is True
    assert store.exists("jti-1") is True


def test_keys_use_prefix(fake_redis):
    store = RedisRevocationStore(r=fake_redis, prefix="test:revoked:")
    store.insert("abc", expires_at=_now() + timedelta(minutes=1))

    assert fake_redis.exists("test:revoked:abc") == 1


def test_absent_entry_ttl(store):
    assert store.ttl("missing") == -2
