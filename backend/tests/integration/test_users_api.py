"""End-to-end tests for the /users endpoints."""

from __future__ import annotations

from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from tests.helpers.http import API, json_headers
from tokenauth.core.errors import NOT_LOGGED_IN
from tokenauth.models import RefreshToken, User


def sign_up(client, payload):
    return client.post(f"{API}/users/sign_up", json=payload, headers=json_headers())


def access_for(client, user) -> str:
    resp = client.post(
        f"{API}/auth/login",
        json={"user": {"email": user.email, "password": DEFAULT_PASSWORD}},
        headers=json_headers(),
    )
    assert resp.status_code == 200
    return resp.get_json()["access_token"]


class TestSignUp:
    def test_sign_up_then_login(self, client, db, session):
        resp = sign_up(client, {"user": {"email": "New@Example.com", "password": "password123"}})

        assert resp.status_code == 201
        assert resp.get_json() == {"message": "You have successfully registered"}
        assert session.query(User).filter_by(email="new@example.com").count() == 1

        login = client.post(
            f"{API}/auth/login",
            json={"user": {"email": "new@example.com", "password": "password123"}},
        )
        assert login.status_code == 200

    def test_sign_up_validation(self, client, db):
        resp = sign_up(client, {"user": {"email": "not-an-email", "password": "short"}})

        assert resp.status_code == 422
        errors = resp.get_json()["errors"]
        assert "email" in errors and "password" in errors

    def test_sign_up_duplicate_email(self, client, db):
        UserFactory(email="dup@example.com")

        resp = sign_up(client, {"email": "dup@example.com", "password": "password123"})

        assert resp.status_code == 409
        assert resp.get_json()["detail"] == "Email has already been taken"


class TestDeleteUser:
    def test_requires_authentication(self, client, db):
        user = UserFactory()

        resp = client.delete(f"{API}/users/{user.id}")

        assert resp.status_code == 401
        assert resp.get_json()["detail"] == NOT_LOGGED_IN

    def test_missing_user(self, client, db):
        access = access_for(client, UserFactory())

        resp = client.delete(f"{API}/users/9999", headers=json_headers(access))

        assert resp.status_code == 404

    def test_cannot_delete_someone_else(self, client, db, session):
        owner = UserFactory()
        intruder = UserFactory()
        owner_id = owner.id
        access = access_for(client, intruder)

        resp = client.delete(f"{API}/users/{owner_id}", headers=json_headers(access))

        assert resp.status_code == 403
        assert session.get(User, owner_id) is not None

    def test_delete_self_removes_user_and_refresh_record(self, client, db, session):
        user = UserFactory()
        user_id = user.id
        access = access_for(client, user)
        assert session.query(RefreshToken).filter_by(user_id=user_id).count() == 1

        resp = client.delete(f"{API}/users/{user_id}", headers=json_headers(access))

        assert resp.status_code == 204
        session.expire_all()
        assert session.get(User, user_id) is None
        assert session.query(RefreshToken).filter_by(user_id=user_id).count() == 0
        assert client.post(f"{API}/auth/refresh").status_code == 401


def test_sign_up_with_generated_identity(client, db, faker):
    email, password = faker.unique.email(), faker.password(length=12)

    assert sign_up(client, {"user": {"email": email, "password": password}}).status_code == 201
    resp = client.post(
        f"{API}/auth/login", json={"user": {"email": email, "password": password}}
    )
    assert resp.status_code == 200
