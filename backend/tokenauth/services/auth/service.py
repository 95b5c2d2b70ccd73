# tokenauth/services/auth/service.py
from __future__ import annotations

from tokenauth.services._shared.base import BaseService
from tokenauth.services._shared.ports import RefreshTokenStore, TokenCodec
from tokenauth.services._shared.result import Err, Ok, Result

from .authentication import AuthenticationService
from .dto import AuthFailure, LoginIn, TokenPairOut, Unauthorized
from .guard import AuthorizationGuard
from .issuer import TokenIssuer
from .refresher import TokenRefresher


class AuthService(BaseService):
    """
    Authentication lifecycle service (login / refresh / authorize / logout).

    Wires the token components around one codec and one refresh-token store
    and is what the HTTP layer talks to.
    """

    def __init__(
        self,
        *,
        codec: TokenCodec,
        store: RefreshTokenStore,
        authenticator: AuthenticationService | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param codec: Signs and verifies tokens.
        :param store: Holds the single refresh-token record per user.
        :param authenticator: Credential check (defaults to the repository-backed one).
        """
        super().__init__()
        self.authenticator = authenticator or AuthenticationService()
        self.issuer = TokenIssuer(codec=codec, store=store)
        self.refresher = TokenRefresher(codec=codec, store=store, issuer=self.issuer)
        self.guard = AuthorizationGuard(codec=codec, store=store)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> Result[TokenPairOut, AuthFailure]:
        """
        Authenticate credentials and issue a fresh token pair.

        Nothing is written when authentication fails.
        """
        outcome = self.authenticator.authenticate(dto.email, dto.password)
        if isinstance(outcome, Err):
            return outcome
        return Ok(self.issuer.issue(outcome.value))

    # ------------------------------------------------------------------ #
    # Refresh / authorize / logout
    # ------------------------------------------------------------------ #

    def refresh(self, refresh_token: str | None) -> Result[TokenPairOut, Unauthorized]:
        return self.refresher.refresh(refresh_token)

    def authorize(self, authorization_header: str | None) -> Result[int, Unauthorized]:
        """Resolve the user id behind an ``Authorization`` header."""
        return self.guard.authorize_header(authorization_header)

    def logout(self, authorization_header: str | None) -> Result[bool, Unauthorized]:
        """
        Authorize the caller, then drop their refresh-token record.

        :returns: ``Ok(removed)`` or the authorization failure.
        """
        outcome = self.authorize(authorization_header)
        if isinstance(outcome, Err):
            return outcome
        return Ok(self.guard.logout(outcome.value))
