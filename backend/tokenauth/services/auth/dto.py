# tokenauth/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from tokenauth.core.errors import NOT_LOGGED_IN
from tokenauth.services._shared.ports import TokenFailure

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email (normalized by the repository lookup).
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT (returned in the response body).
    :type access_token: str
    :param refresh_token: Encoded refresh JWT (returned via HttpOnly cookie).
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


# ----------------------------- Failures ----------------------------------- #


class AuthFailure(str, Enum):
    """Login failure. Unknown email and wrong password are the same value."""

    INVALID_CREDENTIALS = "invalid_credentials"


@dataclass(frozen=True, slots=True)
class Unauthorized:
    """
    Rejection of a token at the authorize/refresh boundary.

    :param reason: Diagnostic cause, for logs only.
    :param message: Caller-facing text; identical for every reason.
    """

    reason: TokenFailure
    message: str = NOT_LOGGED_IN
