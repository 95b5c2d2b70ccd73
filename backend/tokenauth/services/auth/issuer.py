# tokenauth/services/auth/issuer.py
from __future__ import annotations

import logging

from tokenauth.services._shared.ports import (
    RefreshTokenStore,
    TokenCodec,
    TokenType,
    hash_token,
)
from tokenauth.services._shared.result import Err

from .dto import TokenPairOut

logger = logging.getLogger(__name__)


class TokenIssuer:
    """
    Mint an access/refresh pair for a user and record the refresh token.

    The store receives exactly one create-or-replace per call, so a user never
    holds more than one refreshable session.
    """

    def __init__(self, *, codec: TokenCodec, store: RefreshTokenStore) -> None:
        self.codec = codec
        self.store = store

    def issue(self, user_id: int) -> TokenPairOut:
        access = self.codec.encode(user_id, TokenType.ACCESS)
        refresh = self.codec.encode(user_id, TokenType.REFRESH)

        # Only the digest is persisted; expiry mirrors the token's own claim.
        decoded = self.codec.decode(refresh, TokenType.REFRESH)
        if isinstance(decoded, Err):
            raise RuntimeError(f"Freshly minted refresh token failed to verify: {decoded.error}")
        self.store.replace(
            user_id=user_id,
            token_hash=hash_token(refresh),
            expires_at=decoded.value.expires_at,
        )
        logger.info("Token pair issued", extra={"user_id": user_id})
        return TokenPairOut(access_token=access, refresh_token=refresh)
