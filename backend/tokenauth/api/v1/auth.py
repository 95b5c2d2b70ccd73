"""Authentication endpoints: login, token refresh, current user and logout."""

from __future__ import annotations

from flask import Blueprint, Response, current_app, g, request
from flask_jwt_extended import set_refresh_cookies, unset_refresh_cookies

from tokenauth.api.deps import (
    get_auth_service,
    get_identity_service,
    json_response,
    refresh_cookie_max_age,
    require_auth,
    timing,
)
from tokenauth.core.errors import APIError, Unauthorized
from tokenauth.schemas import LoginSchema, TokenResponseSchema, WhoAmISchema
from tokenauth.services._shared.base import BaseService
from tokenauth.services._shared.errors import ServiceError
from tokenauth.services._shared.result import Err
from tokenauth.services.auth import LoginIn, TokenPairOut

bp = Blueprint("auth", __name__, url_prefix="/auth")

INVALID_LOGIN = "Invalid email or password"

login_schema = LoginSchema()
token_schema = TokenResponseSchema()
whoami_schema = WhoAmISchema()


def _token_response(pair: TokenPairOut) -> Response:
    """Access token in the body, refresh token in an HttpOnly cookie."""

    response = json_response(token_schema.dump({"access_token": pair.access_token}))
    set_refresh_cookies(response, pair.refresh_token, max_age=refresh_cookie_max_age())
    return response


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    data = login_schema.load(request.get_json(silent=True) or {})
    outcome = get_auth_service().login(LoginIn(email=data["email"], password=data["password"]))
    if isinstance(outcome, Err):
        raise APIError(
            INVALID_LOGIN,
            status_code=400,
            code="invalid_credentials",
            details={"errors": [INVALID_LOGIN]},
        )
    return _token_response(outcome.value)


@bp.post("/refresh")
@timing
def refresh():
    """Rotate the refresh cookie and issue a new access token."""

    token = request.cookies.get(current_app.config["JWT_REFRESH_COOKIE_NAME"])
    outcome = get_auth_service().refresh(token)
    if isinstance(outcome, Err):
        raise Unauthorized(outcome.error.message)
    return _token_response(outcome.value)


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the authenticated user."""

    try:
        user = get_identity_service().get_user(g.current_user_id)
    except ServiceError as exc:
        raise BaseService.translate_exceptions(exc) from exc
    return json_response({"data": whoami_schema.dump(user)})


@bp.delete("/logout")
@timing
def logout():
    """Drop the caller's refresh-token record and clear the cookie."""

    outcome = get_auth_service().logout(request.headers.get("Authorization"))
    if isinstance(outcome, Err):
        raise Unauthorized(outcome.error.message)
    response = json_response({"message": "You have successfully logged out."})
    unset_refresh_cookies(response)
    return response
