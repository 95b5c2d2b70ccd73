# tokenauth/infra/jwt/jwt_token_codec.py
from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import jwt
from jwt.utils import base64url_decode

from tokenauth.core.clock import Clock, SystemClock
from tokenauth.services._shared.ports import (
    TokenCodec,
    TokenFailure,
    TokenPayload,
    TokenSettings,
    TokenType,
)
from tokenauth.services._shared.result import Err, Ok, Result

_TYPES_BY_VALUE = {t.value: t for t in TokenType}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _has_readable_claims(token: str) -> bool:
    """True when the header and payload segments both decode to JSON objects."""
    segments = token.split(".", 2)
    if len(segments) != 3:
        return False
    try:
        return all(isinstance(json.loads(base64url_decode(s)), dict) for s in segments[:2])
    except ValueError:
        return False


@dataclass(slots=True)
class JWTTokenCodec(TokenCodec):
    """
    HMAC-signed JWT codec built on PyJWT.

    Claims: ``sub`` (user id as string), ``type`` (``access``/``refresh``),
    ``iat``, ``exp`` (epoch seconds) and a random ``jti``.

    Verification order is fixed: signature, structure, expiry, type. A forged
    token therefore fails before anything about its contents is inspected.
    Expiry is checked against the injected clock, never PyJWT's wall clock.
    """

    settings: TokenSettings
    clock: Clock = field(default_factory=SystemClock)

    def encode(self, subject: int | str, token_type: TokenType) -> str:
        issued_at = int(self.clock.now().timestamp())
        ttl = int(self.settings.ttl_for(token_type).total_seconds())
        claims = {
            "sub": str(subject),
            "type": token_type.value,
            "iat": issued_at,
            "exp": issued_at + ttl,
            "jti": uuid4().hex,
        }
        return jwt.encode(claims, self.settings.secret, algorithm=self.settings.algorithm)

    def decode(self, token: str, expected_type: TokenType) -> Result[TokenPayload, TokenFailure]:
        # 1) signature (PyJWT rejects undecodable segments first: nothing to verify)
        try:
            claims = jwt.decode(
                token,
                self.settings.secret,
                algorithms=[self.settings.algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError):
            return Err(TokenFailure.INVALID_SIGNATURE)
        except jwt.DecodeError:
            # readable header and payload: only the signature segment is damaged
            if _has_readable_claims(token):
                return Err(TokenFailure.INVALID_SIGNATURE)
            return Err(TokenFailure.MALFORMED)
        except jwt.InvalidTokenError:
            return Err(TokenFailure.MALFORMED)

        # 2) structure
        payload = self._to_payload(claims)
        if payload is None:
            return Err(TokenFailure.MALFORMED)

        # 3) expiry against the injected clock
        if payload.expires_at < self.clock.now():
            return Err(TokenFailure.EXPIRED)

        # 4) purpose
        if payload.type is not expected_type:
            return Err(TokenFailure.TYPE_MISMATCH)

        return Ok(payload)

    @staticmethod
    def _to_payload(claims: Any) -> TokenPayload | None:
        """Validate claim shapes; ``None`` when anything is missing or mistyped."""
        if not isinstance(claims, dict):
            return None
        sub, ttype = claims.get("sub"), claims.get("type")
        iat, exp, jti = claims.get("iat"), claims.get("exp"), claims.get("jti")
        if not isinstance(sub, str) or not sub:
            return None
        if ttype not in _TYPES_BY_VALUE:
            return None
        if not (_is_int(iat) and _is_int(exp)) or exp <= iat:
            return None
        if not isinstance(jti, str):
            return None
        return TokenPayload(
            subject=sub,
            type=_TYPES_BY_VALUE[ttype],
            issued_at=datetime.fromtimestamp(iat, tz=UTC),
            expires_at=datetime.fromtimestamp(exp, tz=UTC),
            jti=jti,
        )
