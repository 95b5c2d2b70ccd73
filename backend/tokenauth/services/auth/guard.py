# tokenauth/services/auth/guard.py
from __future__ import annotations

import logging

from tokenauth.services._shared.ports import RefreshTokenStore, TokenCodec, TokenFailure, TokenType
from tokenauth.services._shared.result import Err, Ok, Result

from ._converters import coerce_user_id
from .dto import Unauthorized

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


class AuthorizationGuard:
    """
    Resolve the caller of a protected operation from an access token.

    Every rejection carries the same caller-facing message; the specific
    reason only reaches the logs.
    """

    def __init__(self, *, codec: TokenCodec, store: RefreshTokenStore) -> None:
        self.codec = codec
        self.store = store

    def authorize(self, access_token: str | None) -> Result[int, Unauthorized]:
        if not access_token:
            return self._deny(TokenFailure.MISSING)

        decoded = self.codec.decode(access_token, TokenType.ACCESS)
        if isinstance(decoded, Err):
            return self._deny(decoded.error)

        user_id = coerce_user_id(decoded.value.subject)
        if user_id is None:
            return self._deny(TokenFailure.MALFORMED)
        return Ok(user_id)

    def authorize_header(self, header: str | None) -> Result[int, Unauthorized]:
        """Authorize an ``Authorization: Bearer <token>`` header value."""
        return self.authorize(self.extract_bearer(header))

    @staticmethod
    def extract_bearer(header: str | None) -> str | None:
        """Return the token of a ``Bearer`` header (scheme is case-insensitive)."""
        if not header:
            return None
        parts = header.split()
        if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME:
            return None
        return parts[1]

    def logout(self, user_id: int) -> bool:
        """
        Delete the user's refresh-token record.

        Outstanding access tokens are stateless and stay valid until they
        expire on their own.

        :returns: ``True`` if a record was removed.
        """
        removed = self.store.delete(user_id)
        logger.info("Logged out", extra={"user_id": user_id})
        return removed

    @staticmethod
    def _deny(reason: TokenFailure) -> Err[Unauthorized]:
        logger.info("Authorization denied", extra={"reason": reason.value})
        return Err(Unauthorized(reason=reason))
