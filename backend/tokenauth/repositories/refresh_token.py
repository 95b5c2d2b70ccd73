"""Refresh-token repository: one row per user, replaced by upsert."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import delete, select

from tokenauth.models.refresh_token import RefreshToken
from tokenauth.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence for :class:`RefreshToken` keyed by ``user_id``."""

    model = RefreshToken

    def get_by_user(self, user_id: int) -> RefreshToken | None:
        stmt = select(RefreshToken).where(RefreshToken.user_id == user_id)
        return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def upsert(self, *, user_id: int, token_hash: str, expires_at: datetime) -> RefreshToken:
        """Create the user's record or overwrite the existing one in place.

        The row is locked (where the dialect supports it) so two concurrent
        logins for the same user serialize instead of racing on the unique
        ``user_id`` constraint.

        :returns: The persisted record (flushed, not committed).
        """
        stmt = select(RefreshToken).where(RefreshToken.user_id == user_id).with_for_update()
        record = self.session.execute(stmt).scalars().first()
        if record is None:
            record = RefreshToken(user_id=user_id, token_hash=token_hash, expires_at=expires_at)
            self.session.add(record)
        else:
            record.token_hash = token_hash
            record.expires_at = expires_at
        self.flush()
        return record

    def delete_for_user(self, user_id: int) -> bool:
        """Delete the user's record. :returns: ``True`` if a row was removed."""
        result = self.session.execute(delete(RefreshToken).where(RefreshToken.user_id == user_id))
        return bool(result.rowcount)

    def delete_if_matches(self, *, user_id: int, token_hash: str) -> bool:
        """
        Conditionally delete the user's record when it still holds ``token_hash``.

        This is a single ``DELETE ... WHERE user_id = ? AND token_hash = ?``;
        when two transactions race on the same value only one sees a row
        count of 1.

        :returns: ``True`` when this call removed the record.
        """
        stmt = delete(RefreshToken).where(
            RefreshToken.user_id == user_id,
            RefreshToken.token_hash == token_hash,
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1
