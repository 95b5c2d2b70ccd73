"""User endpoints: registration and account removal."""

from __future__ import annotations

from flask import Blueprint, g, request

from tokenauth.api.deps import get_identity_service, json_response, require_auth, timing
from tokenauth.schemas import RegisterSchema
from tokenauth.services._shared.base import BaseService
from tokenauth.services._shared.errors import ServiceError
from tokenauth.services.identity import UserRegisterIn

bp = Blueprint("users", __name__, url_prefix="/users")

register_schema = RegisterSchema()


@bp.post("/sign_up")
@timing
def sign_up():
    """Register a new user."""

    data = register_schema.load(request.get_json(silent=True) or {})
    try:
        get_identity_service().register_user(
            UserRegisterIn(email=data["email"], password=data["password"])
        )
    except ServiceError as exc:
        raise BaseService.translate_exceptions(exc) from exc
    return json_response({"message": "You have successfully registered"}, status=201)


@bp.delete("/<int:user_id>")
@require_auth
@timing
def delete_user(user_id: int):
    """Delete the caller's own account together with its refresh token."""

    try:
        get_identity_service().delete_user(actor_id=g.current_user_id, user_id=user_id)
    except ServiceError as exc:
        raise BaseService.translate_exceptions(exc) from exc
    return "", 204
