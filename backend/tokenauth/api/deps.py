"""Shared API helpers: service wiring, auth guard decorator and response helpers."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import Response, current_app, g, jsonify, request

from tokenauth.core.clock import Clock, SystemClock
from tokenauth.core.errors import Unauthorized
from tokenauth.core.extensions import get_redis
from tokenauth.infra.jwt.jwt_token_codec import JWTTokenCodec
from tokenauth.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from tokenauth.infra.sql.sqlalchemy_refresh_token_store import SQLAlchemyRefreshTokenStore
from tokenauth.services._shared.ports import (
    InMemoryRefreshTokenStore,
    RefreshTokenStore,
    TokenSettings,
)
from tokenauth.services._shared.result import Err
from tokenauth.services.auth import AuthService
from tokenauth.services.identity import IdentityService

F = TypeVar("F", bound=Callable[..., Any])


# --------------------------------------------------------------------------- #
# Wiring
# --------------------------------------------------------------------------- #


def get_token_settings() -> TokenSettings:
    """Return the app's signing settings, frozen on first use."""

    settings = current_app.extensions.get("token_settings")
    if settings is None:
        cfg = current_app.config
        settings = TokenSettings(
            secret=cfg["JWT_SECRET_KEY"],
            access_ttl=cfg["JWT_ACCESS_TOKEN_EXPIRES"],
            refresh_ttl=cfg["JWT_REFRESH_TOKEN_EXPIRES"],
            algorithm=cfg.get("JWT_ALGORITHM", "HS256"),
        )
        current_app.extensions["token_settings"] = settings
    return cast(TokenSettings, settings)


def get_clock() -> Clock:
    """Return the injected clock (``app.extensions["clock"]``) or wall time."""

    clock = current_app.extensions.get("clock")
    return cast(Clock, clock) if clock is not None else SystemClock()


def get_refresh_store() -> RefreshTokenStore:
    """Build the refresh-token store selected by ``REFRESH_TOKEN_BACKEND``."""

    backend = str(current_app.config.get("REFRESH_TOKEN_BACKEND", "database")).lower()
    if backend == "redis":
        return RedisRefreshTokenStore(r=get_redis(), clock=get_clock())
    if backend == "memory":
        store = current_app.extensions.setdefault("refresh_store", InMemoryRefreshTokenStore())
        return cast(RefreshTokenStore, store)
    return SQLAlchemyRefreshTokenStore()


def get_auth_service() -> AuthService:
    codec = JWTTokenCodec(settings=get_token_settings(), clock=get_clock())
    return AuthService(codec=codec, store=get_refresh_store())


def get_identity_service() -> IdentityService:
    return IdentityService(refresh_store=get_refresh_store())


def refresh_cookie_max_age() -> int:
    """Cookie lifetime in seconds, equal to the refresh token's validity."""

    return int(get_token_settings().refresh_ttl.total_seconds())


# --------------------------------------------------------------------------- #
# Decorators
# --------------------------------------------------------------------------- #


def require_auth(func: F) -> F:
    """Ensure the request carries a valid access token; sets ``g.current_user_id``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        outcome = get_auth_service().authorize(request.headers.get("Authorization"))
        if isinstance(outcome, Err):
            raise Unauthorized(outcome.error.message)
        g.current_user_id = outcome.value
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# --------------------------------------------------------------------------- #
# Responses
# --------------------------------------------------------------------------- #


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response
