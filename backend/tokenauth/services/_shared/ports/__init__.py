"""
tokenauth.services._shared.ports
================================

*Ports* (hexagonal interfaces) for token handling.

Modules
-------
- :mod:`token_codec`:
    Defines :class:`~.TokenCodec` with :class:`~.TokenType`,
    :class:`~.TokenPayload`, :class:`~.TokenFailure` and
    :class:`~.TokenSettings`: signing and verification of expiring tokens.

- :mod:`refresh_token_store`:
    Defines :class:`~.RefreshTokenStore` and :class:`~.RefreshRecordView`:
    the single refresh-token record per user, with atomic consumption.

Concrete adapters (JWT, SQL, Redis) live under ``tokenauth.infra``.
"""

from __future__ import annotations

from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshRecordView,
    RefreshTokenStore,
    hash_token,
)
from .token_codec import TokenCodec, TokenFailure, TokenPayload, TokenSettings, TokenType

__all__ = [
    "TokenCodec",
    "TokenFailure",
    "TokenPayload",
    "TokenSettings",
    "TokenType",
    "RefreshTokenStore",
    "RefreshRecordView",
    "InMemoryRefreshTokenStore",
    "hash_token",
]
