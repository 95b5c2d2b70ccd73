"""Pytest fixtures: app per test, fresh in-memory schema, frozen clock.

In-memory SQLite runs on a single static connection, so creating and dropping
the schema per test is cheap and gives every case a clean database.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from datetime import UTC, datetime
from typing import Any

import fakeredis
import pytest
from flask import Flask

from tokenauth.core.clock import FrozenClock
from tokenauth.core.config import TestingConfig
from tokenauth.core.extensions import db as _db
from tokenauth.factory import create_app
from tokenauth.infra.jwt.jwt_token_codec import JWTTokenCodec
from tokenauth.services._shared.ports import TokenSettings

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture()
def clock() -> FrozenClock:
    """Deterministic time source shared by the app and direct codec users."""
    return FrozenClock(T0)


@pytest.fixture()
def app(clock: FrozenClock) -> Generator[Flask, None, None]:
    """Create a Flask application configured for testing.

    The app context stays pushed for the whole test so services, repositories
    and the test client share one scoped session.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    application = create_app(TestingConfig, instance_relative_config=False)
    application.extensions["clock"] = clock
    with application.app_context():
        yield application


@pytest.fixture()
def db(app: Flask) -> Generator[Any, None, None]:
    """Create all tables before the test and drop them afterwards.

    Factory Boy is bound to the app session for the duration of the test.
    """
    from tests.factories import SQLAlchemySession

    _db.create_all()
    SQLAlchemySession.set(_db.session)
    yield _db
    SQLAlchemySession.set(None)
    _db.session.remove()
    _db.drop_all()


@pytest.fixture()
def session(db: Any):
    """Return the Flask-SQLAlchemy scoped session used by application code."""
    return db.session


@pytest.fixture()
def client(app: Flask, db: Any):
    """Return a Flask test client with the schema in place."""
    return app.test_client()


@pytest.fixture()
def token_settings(app: Flask) -> TokenSettings:
    cfg = app.config
    return TokenSettings(
        secret=cfg["JWT_SECRET_KEY"],
        access_ttl=cfg["JWT_ACCESS_TOKEN_EXPIRES"],
        refresh_ttl=cfg["JWT_REFRESH_TOKEN_EXPIRES"],
    )


@pytest.fixture()
def codec(token_settings: TokenSettings, clock: FrozenClock) -> JWTTokenCodec:
    """Codec signing with the app's secret and the frozen clock."""
    return JWTTokenCodec(settings=token_settings, clock=clock)


@pytest.fixture()
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk

