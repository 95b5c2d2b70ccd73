"""
IdentityService
===============

Service responsible for the `User` aggregate:
- Registration (password hashed before persistence)
- Lookup
- Account removal together with the user's refresh-token record
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from tokenauth.models.user import User
from tokenauth.repositories.refresh_token import RefreshTokenRepository
from tokenauth.repositories.user import UserRepository
from tokenauth.services._shared.base import BaseService
from tokenauth.services._shared.errors import ConflictError, NotFoundError, violates
from tokenauth.services._shared.ports import RefreshTokenStore
from tokenauth.services.identity.dto import UserPublicOut, UserRegisterIn

logger = logging.getLogger(__name__)


class IdentityService(BaseService):
    """
    Application service for the `User` aggregate.

    :param refresh_store: Refresh-token store in use. When it lives outside
        the database (Redis), deletion also clears it there.
    """

    def __init__(self, *, refresh_store: RefreshTokenStore | None = None) -> None:
        super().__init__()
        self.refresh_store = refresh_store

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def register_user(self, dto: UserRegisterIn) -> UserPublicOut:
        """
        Register a new user.

        :param dto: User registration input DTO.
        :type dto: UserRegisterIn
        :returns: Public-safe user DTO.
        :rtype: UserPublicOut
        :raises ConflictError: If the email is already taken.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users

            if repo.exists_by_email(dto.email):
                raise ConflictError("Email", "has already been taken")

            try:
                user = repo.model(email=dto.email, password=dto.password)  # setter hashes
                repo.add(user)
            except IntegrityError as exc:
                if violates(exc, "uq_users_email"):
                    raise ConflictError("Email", "has already been taken") from exc
                raise

            out = UserPublicOut(id=user.id, email=user.email, created_at=user.created_at)

        logger.info("User registered", extra={"user_id": out.id})
        return out

    # --------------------------------------------------------------------- #
    # Queries
    # --------------------------------------------------------------------- #

    def get_user(self, user_id: int) -> UserPublicOut:
        """
        Fetch a user by id.

        :raises NotFoundError: If no such user exists.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return UserPublicOut(id=user.id, email=user.email, created_at=user.created_at)

    # --------------------------------------------------------------------- #
    # Removal
    # --------------------------------------------------------------------- #

    def delete_user(self, *, actor_id: int, user_id: int) -> None:
        """
        Delete ``user_id`` on behalf of ``actor_id``.

        Two explicit steps in one transaction: the refresh-token record, then
        the user. The foreign key cascades as well.

        :raises NotFoundError: If the user does not exist.
        :raises AuthorizationError: If the actor is not the user.
        """
        with self.rw_uow() as uow:
            users: UserRepository = uow.users
            tokens: RefreshTokenRepository = uow.refresh_tokens

            user = users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            self.ensure_owner(actor_id, user_id, msg="You can only delete your own account.")

            self._remove(users, tokens, user)

        self._forget_refresh(user_id)
        logger.info("User deleted", extra={"user_id": user_id})

    def purge_user(self, email: str) -> int:
        """
        Operator deletion by email, without an ownership check.

        :returns: The removed user's id.
        :raises NotFoundError: If no user has that email.
        """
        with self.rw_uow() as uow:
            users: UserRepository = uow.users
            user = users.get_by_email(email)
            if user is None:
                raise NotFoundError("User", email)
            user_id = user.id
            self._remove(users, uow.refresh_tokens, user)

        self._forget_refresh(user_id)
        logger.info("User purged", extra={"user_id": user_id})
        return user_id

    @staticmethod
    def _remove(users: UserRepository, tokens: RefreshTokenRepository, user: User) -> None:
        tokens.delete_for_user(user.id)
        users.delete(user)

    def _forget_refresh(self, user_id: int) -> None:
        if self.refresh_store is not None:
            self.refresh_store.delete(user_id)
