"""Token lifecycle: credential check, issuance, rotation and authorization."""

from __future__ import annotations

from .authentication import AuthenticationService, CredentialVerifier
from .dto import AuthFailure, LoginIn, TokenPairOut, Unauthorized
from .guard import AuthorizationGuard
from .issuer import TokenIssuer
from .refresher import TokenRefresher
from .service import AuthService

__all__ = [
    "AuthService",
    "AuthenticationService",
    "CredentialVerifier",
    "TokenIssuer",
    "TokenRefresher",
    "AuthorizationGuard",
    "AuthFailure",
    "LoginIn",
    "TokenPairOut",
    "Unauthorized",
]
