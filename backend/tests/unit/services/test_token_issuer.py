"""Unit tests for TokenIssuer."""

from __future__ import annotations

import pytest

from tests.helpers.doubles import RecordingStore
from tokenauth.services._shared.ports import TokenType, hash_token
from tokenauth.services._shared.result import Ok
from tokenauth.services.auth import TokenIssuer


@pytest.fixture()
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture()
def issuer(codec, store) -> TokenIssuer:
    return TokenIssuer(codec=codec, store=store)


def test_issue_returns_access_and_refresh_for_same_subject(issuer, codec):
    pair = issuer.issue(11)

    access = codec.decode(pair.access_token, TokenType.ACCESS)
    refresh = codec.decode(pair.refresh_token, TokenType.REFRESH)
    assert isinstance(access, Ok) and isinstance(refresh, Ok)
    assert access.value.subject == refresh.value.subject == "11"


def test_access_expires_before_refresh(issuer, codec):
    pair = issuer.issue(11)

    access = codec.decode(pair.access_token, TokenType.ACCESS).value
    refresh = codec.decode(pair.refresh_token, TokenType.REFRESH).value
    assert access.expires_at < refresh.expires_at


def test_issue_writes_exactly_one_replace(issuer, store):
    issuer.issue(11)

    assert store.calls == ["replace"]


def test_record_holds_digest_and_expiry_of_refresh_token(issuer, store, codec):
    pair = issuer.issue(11)

    view = store.get(11)
    assert view is not None
    assert view.token_hash == hash_token(pair.refresh_token)
    assert view.token_hash != pair.refresh_token
    assert view.expires_at == codec.decode(pair.refresh_token, TokenType.REFRESH).value.expires_at


def test_second_issue_replaces_previous_record(issuer, store):
    first = issuer.issue(11)
    second = issuer.issue(11)

    assert len(store) == 1
    assert store.get(11).token_hash == hash_token(second.refresh_token)
    assert store.get(11).token_hash != hash_token(first.refresh_token)
