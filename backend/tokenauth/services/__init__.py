"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`tokenauth.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``tokenauth.services._shared.base``)
    * :class:`BaseService`

- Auth service (from ``tokenauth.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`LoginIn`, :class:`TokenPairOut`, :class:`AuthFailure`,
      :class:`Unauthorized`

- Identity service (from ``tokenauth.services.identity``)
    * :class:`IdentityService`
    * DTOs: :class:`UserRegisterIn`, :class:`UserPublicOut`
"""

from __future__ import annotations

from ._shared.base import BaseService
from .auth import AuthFailure, AuthService, LoginIn, TokenPairOut, Unauthorized
from .identity import IdentityService, UserPublicOut, UserRegisterIn

__all__ = [
    # Base
    "BaseService",
    # Auth
    "AuthService",
    "LoginIn",
    "TokenPairOut",
    "AuthFailure",
    "Unauthorized",
    # Identity
    "IdentityService",
    "UserRegisterIn",
    "UserPublicOut",
]
