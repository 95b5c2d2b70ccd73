"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData, event
from sqlalchemy.engine import Engine

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()
redis_client: redis.Redis | None = None


@event.listens_for(Engine, "connect")
def _sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # pragma: no cover
    """Turn on FK enforcement for SQLite so ``ON DELETE CASCADE`` applies."""
    module = type(dbapi_connection).__module__
    if module.startswith(("sqlite3", "pysqlite")):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, the JWT cookie helpers and Redis.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`tokenauth.models` package to ensure SQLAlchemy metadata is ready
        for migrations.

    Notes
    -----
    Redis is only contacted when ``REFRESH_TOKEN_BACKEND`` is ``"redis"``;
    a missing or unreachable server is a startup error in that case.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from tokenauth import models as _models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)

    global redis_client
    redis_url = app.config.get("REDIS_URL")
    if app.config.get("REFRESH_TOKEN_BACKEND") != "redis":
        redis_client = None
        app.extensions.pop("redis_client", None)
        return

    if not redis_url:
        raise RuntimeError("REFRESH_TOKEN_BACKEND=redis requires REDIS_URL to be set.")

    redis_client = redis.Redis.from_url(redis_url)
    try:
        redis_client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions["redis_client"] = redis_client


def get_redis() -> redis.Redis:
    """Return the Redis client bound to the current app."""
    client = current_app.extensions.get("redis_client", redis_client)
    if client is None:
        raise RuntimeError("Redis client is not initialized. Call init_app() first.")
    return client
