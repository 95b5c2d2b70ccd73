# tokenauth/services/auth/refresher.py
from __future__ import annotations

import logging

from tokenauth.services._shared.ports import (
    RefreshTokenStore,
    TokenCodec,
    TokenFailure,
    TokenType,
    hash_token,
)
from tokenauth.services._shared.result import Err, Ok, Result

from ._converters import coerce_user_id
from .dto import TokenPairOut, Unauthorized
from .issuer import TokenIssuer

logger = logging.getLogger(__name__)


class TokenRefresher:
    """
    Exchange a refresh token for a new pair (rotation).

    Each refresh token is single-use: the stored record is consumed
    atomically before the new pair is minted, so replaying the same token,
    or racing two requests with it, succeeds at most once.
    """

    def __init__(self, *, codec: TokenCodec, store: RefreshTokenStore, issuer: TokenIssuer) -> None:
        self.codec = codec
        self.store = store
        self.issuer = issuer

    def refresh(self, old_refresh_token: str | None) -> Result[TokenPairOut, Unauthorized]:
        """
        Rotate ``old_refresh_token``.

        Failure branches, in order:

        1. missing token or any codec failure (signature, structure, expiry, type);
        2. subject that is not a user id;
        3. no record for the user, or the record holds a different token
           (already rotated out or logged out).

        :returns: ``Ok(TokenPairOut)`` or ``Err(Unauthorized)``.
        """
        if not old_refresh_token:
            return self._deny(TokenFailure.MISSING)

        decoded = self.codec.decode(old_refresh_token, TokenType.REFRESH)
        if isinstance(decoded, Err):
            return self._deny(decoded.error)

        user_id = coerce_user_id(decoded.value.subject)
        if user_id is None:
            return self._deny(TokenFailure.MALFORMED)

        if not self.store.consume(user_id=user_id, token_hash=hash_token(old_refresh_token)):
            return self._deny(TokenFailure.REVOKED, user_id=user_id)

        pair = self.issuer.issue(user_id)
        logger.info("Refresh token rotated", extra={"user_id": user_id})
        return Ok(pair)

    @staticmethod
    def _deny(reason: TokenFailure, *, user_id: int | None = None) -> Err[Unauthorized]:
        logger.info("Refresh rejected", extra={"reason": reason.value, "user_id": user_id})
        return Err(Unauthorized(reason=reason))
