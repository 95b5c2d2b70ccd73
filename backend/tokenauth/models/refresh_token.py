"""Refresh-token record: at most one live row per user."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from tokenauth.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class RefreshToken(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Server-side half of a refresh token.

    Fields
    ------
    user_id : int
        Owner. Unique, so a user has zero or one record; ``ON DELETE CASCADE``.
    token_hash : str
        SHA-256 hex digest of the refresh token currently valid for the user.
        The raw token is never stored.
    expires_at : datetime
        Expiry of that refresh token (mirrors its ``exp`` claim).
    """

    __tablename__ = "refresh_tokens"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    token_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (UniqueConstraint("user_id", name="uq_refresh_tokens_user_id"),)
