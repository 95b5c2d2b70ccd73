from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Protocol

from tokenauth.services._shared.result import Result


class TokenType(str, Enum):
    """Purpose of a token. The two kinds differ only in lifetime and use."""

    ACCESS = "access"
    REFRESH = "refresh"


class TokenFailure(str, Enum):
    """
    Why a token was rejected.

    The distinction is kept for logs and diagnostics only; callers collapse
    every member into a single "not logged in" answer.
    """

    MISSING = "missing"
    MALFORMED = "malformed"
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "expired"
    TYPE_MISMATCH = "type_mismatch"
    REVOKED = "revoked"


@dataclass(frozen=True, slots=True)
class TokenPayload:
    """
    Verified token contents.

    :ivar subject: User id the token was issued for (``sub`` claim).
    :ivar type: Access or refresh.
    :ivar issued_at: ``iat`` as an aware UTC datetime.
    :ivar expires_at: ``exp`` as an aware UTC datetime.
    :ivar jti: Random token identifier.
    """

    subject: str
    type: TokenType
    issued_at: datetime
    expires_at: datetime
    jti: str


@dataclass(frozen=True, slots=True)
class TokenSettings:
    """
    Immutable signing configuration, built once at startup.

    :ivar secret: HMAC key. Never request-supplied.
    :ivar access_ttl: Access token lifetime.
    :ivar refresh_ttl: Refresh token lifetime.
    :ivar algorithm: HMAC algorithm name understood by PyJWT.
    """

    secret: str
    access_ttl: timedelta
    refresh_ttl: timedelta
    algorithm: str = "HS256"

    def __post_init__(self) -> None:
        if not self.secret:
            raise ValueError("Token signing secret must not be empty.")
        if not self.algorithm.startswith("HS"):
            raise ValueError("Only HMAC algorithms (HS256/HS384/HS512) are supported.")
        if self.access_ttl <= timedelta(0) or self.refresh_ttl <= timedelta(0):
            raise ValueError("Token lifetimes must be positive.")
        if self.access_ttl >= self.refresh_ttl:
            raise ValueError("Access tokens must expire before refresh tokens.")

    def ttl_for(self, token_type: TokenType) -> timedelta:
        return self.access_ttl if token_type is TokenType.ACCESS else self.refresh_ttl


class TokenCodec(Protocol):
    """Port for encoding and verifying signed, expiring tokens."""

    def encode(self, subject: int | str, token_type: TokenType) -> str: ...

    def decode(
        self, token: str, expected_type: TokenType
    ) -> Result[TokenPayload, TokenFailure]: ...
