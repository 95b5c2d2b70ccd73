"""Unit tests for CredentialVerifier and AuthenticationService."""

from __future__ import annotations

import logging

import pytest

from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from tokenauth.services._shared.result import Err, Ok
from tokenauth.services.auth import AuthenticationService, AuthFailure, CredentialVerifier


class TestCredentialVerifier:
    def test_matching_secret(self, db):
        user = UserFactory(password="s3cret")

        assert CredentialVerifier().verify(user, "s3cret") is True

    def test_wrong_secret(self, db):
        user = UserFactory(password="s3cret")

        assert CredentialVerifier().verify(user, "nope") is False

    def test_absent_user_still_compares_a_hash(self, monkeypatch):
        calls: list[str] = []

        def fake_check(pwhash: str, password: str) -> bool:
            calls.append(password)
            return True

        monkeypatch.setattr("tokenauth.services.auth.authentication.check_password_hash", fake_check)

        assert CredentialVerifier().verify(None, "anything") is False
        assert calls == ["anything"]


class TestAuthenticationService:
    @pytest.fixture()
    def service(self) -> AuthenticationService:
        return AuthenticationService()

    def test_valid_credentials_return_user_id(self, service, db):
        user = UserFactory(email="a@x.com", password="pw")

        assert service.authenticate("a@x.com", "pw") == Ok(user.id)

    def test_email_lookup_is_case_insensitive(self, service, db):
        user = UserFactory(email="a@x.com", password="pw")

        assert service.authenticate("  A@X.COM ", "pw") == Ok(user.id)

    def test_wrong_password_and_unknown_email_are_indistinguishable(self, service, db):
        UserFactory(email="a@x.com", password="pw")

        wrong_password = service.authenticate("a@x.com", "bad")
        unknown_email = service.authenticate("ghost@x.com", DEFAULT_PASSWORD)

        assert wrong_password == unknown_email == Err(AuthFailure.INVALID_CREDENTIALS)

    @pytest.mark.parametrize("identifier,secret", [("", "pw"), ("a@x.com", "")])
    def test_blank_input_is_invalid_credentials(self, service, db, identifier, secret):
        UserFactory(email="a@x.com", password="pw")

        assert service.authenticate(identifier, secret) == Err(AuthFailure.INVALID_CREDENTIALS)

    def test_failure_is_logged_without_the_secret(self, service, db, caplog):
        caplog.set_level(logging.INFO)

        service.authenticate("ghost@x.com", "hunter2")

        assert any(r.getMessage() == "Login rejected" for r in caplog.records)
        assert "hunter2" not in caplog.text
