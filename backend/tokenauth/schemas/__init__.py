"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import LoginSchema, TokenResponseSchema, WhoAmISchema
from .user import RegisterSchema, UserSchema

__all__ = [
    "LoginSchema",
    "RegisterSchema",
    "TokenResponseSchema",
    "WhoAmISchema",
    "UserSchema",
]
