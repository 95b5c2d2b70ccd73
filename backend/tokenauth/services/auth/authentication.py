# tokenauth/services/auth/authentication.py
from __future__ import annotations

import logging
import secrets
from functools import cache

from werkzeug.security import check_password_hash

from tokenauth.models.user import User, hash_password
from tokenauth.repositories.user import UserRepository
from tokenauth.services._shared.base import BaseService
from tokenauth.services._shared.result import Err, Ok, Result

from .dto import AuthFailure

logger = logging.getLogger(__name__)


@cache
def _dummy_hash() -> str:
    """Hash of a random throwaway secret, compared against when the user is absent."""
    return hash_password(secrets.token_urlsafe(16))


class CredentialVerifier:
    """Check a submitted secret against a user's stored hash."""

    def verify(self, user: User | None, secret: str) -> bool:
        """
        Return ``True`` only when ``user`` exists and ``secret`` matches.

        A missing user still pays for one hash comparison, so response time
        does not tell an attacker whether the email is registered.
        """
        if user is None:
            check_password_hash(_dummy_hash(), secret)
            return False
        return user.verify_password(secret)


class AuthenticationService(BaseService):
    """Resolve a login attempt to a user id. Read-only."""

    def __init__(self, *, verifier: CredentialVerifier | None = None) -> None:
        super().__init__()
        self.verifier = verifier or CredentialVerifier()

    def authenticate(self, identifier: str, secret: str) -> Result[int, AuthFailure]:
        """
        Authenticate ``identifier`` (email) and ``secret`` (password).

        :returns: ``Ok(user_id)`` or ``Err(AuthFailure.INVALID_CREDENTIALS)``.
            Unknown email and wrong password produce the same error.
        """
        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_by_email(identifier) if identifier else None
            matched = self.verifier.verify(user, secret or "")
            user_id = user.id if user is not None else None

        if not matched or user_id is None:
            logger.info("Login rejected", extra={"reason": AuthFailure.INVALID_CREDENTIALS.value})
            return Err(AuthFailure.INVALID_CREDENTIALS)

        logger.info("Login accepted", extra={"user_id": user_id})
        return Ok(user_id)
