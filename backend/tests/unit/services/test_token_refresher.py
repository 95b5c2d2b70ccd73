"""Unit tests for TokenRefresher (single-use rotation)."""

from __future__ import annotations

from datetime import timedelta

import pytest

from tests.helpers.doubles import RecordingStore
from tokenauth.core.errors import NOT_LOGGED_IN
from tokenauth.infra.jwt.jwt_token_codec import JWTTokenCodec
from tokenauth.services._shared.ports import TokenFailure, TokenSettings, TokenType, hash_token
from tokenauth.services._shared.result import Err, Ok
from tokenauth.services.auth import TokenIssuer, TokenPairOut, TokenRefresher, Unauthorized


@pytest.fixture()
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture()
def issuer(codec, store) -> TokenIssuer:
    return TokenIssuer(codec=codec, store=store)


@pytest.fixture()
def refresher(codec, store, issuer) -> TokenRefresher:
    return TokenRefresher(codec=codec, store=store, issuer=issuer)


def test_refresh_returns_new_pair(refresher, issuer, codec):
    original = issuer.issue(3)

    result = refresher.refresh(original.refresh_token)

    assert isinstance(result, Ok)
    assert isinstance(result.value, TokenPairOut)
    assert result.value.refresh_token != original.refresh_token
    assert codec.decode(result.value.access_token, TokenType.ACCESS).value.subject == "3"


def test_same_refresh_token_works_only_once(refresher, issuer):
    original = issuer.issue(3)

    first = refresher.refresh(original.refresh_token)
    second = refresher.refresh(original.refresh_token)

    assert isinstance(first, Ok)
    assert second == Err(Unauthorized(reason=TokenFailure.REVOKED))


def test_rotated_token_remains_usable(refresher, issuer):
    original = issuer.issue(3)
    rotated = refresher.refresh(original.refresh_token).value

    assert isinstance(refresher.refresh(rotated.refresh_token), Ok)


def test_at_most_one_record_after_login_refresh_refresh(refresher, issuer, store):
    pair = issuer.issue(3)
    pair = refresher.refresh(pair.refresh_token).value
    pair = refresher.refresh(pair.refresh_token).value

    assert len(store) == 1
    assert store.get(3).token_hash == hash_token(pair.refresh_token)


def test_rotation_consumes_then_replaces(refresher, issuer, store):
    original = issuer.issue(3)
    store.calls.clear()

    refresher.refresh(original.refresh_token)

    assert store.calls == ["consume", "replace"]


def test_missing_token(refresher):
    assert refresher.refresh(None) == Err(Unauthorized(reason=TokenFailure.MISSING))
    assert refresher.refresh("") == Err(Unauthorized(reason=TokenFailure.MISSING))


def test_access_token_cannot_refresh(refresher, issuer, store):
    pair = issuer.issue(3)
    store.calls.clear()

    result = refresher.refresh(pair.access_token)

    assert result == Err(Unauthorized(reason=TokenFailure.TYPE_MISMATCH))
    assert store.calls == []


def test_expired_refresh_token(refresher, issuer, clock, token_settings):
    pair = issuer.issue(3)
    clock.advance(token_settings.refresh_ttl + timedelta(seconds=1))

    assert refresher.refresh(pair.refresh_token) == Err(Unauthorized(reason=TokenFailure.EXPIRED))


def test_forged_refresh_token(refresher, issuer, token_settings, clock):
    issuer.issue(3)
    forger = JWTTokenCodec(
        settings=TokenSettings(
            secret="attacker-controlled-secret-0123456789abcdef",
            access_ttl=token_settings.access_ttl,
            refresh_ttl=token_settings.refresh_ttl,
        ),
        clock=clock,
    )

    result = refresher.refresh(forger.encode(3, TokenType.REFRESH))

    assert result == Err(Unauthorized(reason=TokenFailure.INVALID_SIGNATURE))


def test_non_numeric_subject_is_malformed(refresher, codec):
    token = codec.encode("not-a-user", TokenType.REFRESH)

    assert refresher.refresh(token) == Err(Unauthorized(reason=TokenFailure.MALFORMED))


def test_valid_token_without_record_is_revoked(refresher, codec):
    token = codec.encode(3, TokenType.REFRESH)  # never stored

    assert refresher.refresh(token) == Err(Unauthorized(reason=TokenFailure.REVOKED))


def test_superseded_token_is_revoked_after_new_login(refresher, issuer):
    old = issuer.issue(3)
    issuer.issue(3)  # second login replaces the record

    assert refresher.refresh(old.refresh_token) == Err(Unauthorized(reason=TokenFailure.REVOKED))


def test_every_failure_carries_the_generic_message(refresher):
    result = refresher.refresh("garbage")

    assert isinstance(result, Err)
    assert result.error.message == NOT_LOGGED_IN
