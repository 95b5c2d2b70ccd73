from __future__ import annotations

import hashlib
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


def hash_token(token: str) -> str:
    """Return the SHA-256 hex digest stored in place of a raw refresh token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class RefreshRecordView:
    """
    Read-model for a user's refresh-token record.

    :ivar user_id: Owner user id.
    :ivar token_hash: Digest of the currently valid refresh token.
    :ivar expires_at: Absolute expiration (UTC).
    """

    user_id: int
    token_hash: str
    expires_at: datetime


class RefreshTokenStore(Protocol):
    """
    Stateful store holding **at most one** refresh-token record per user.

    ``replace`` is an upsert, never an append. ``consume`` MUST be atomic:
    when two callers present the same value concurrently, exactly one gets
    ``True``.
    """

    def get(self, user_id: int) -> RefreshRecordView | None:
        """Fetch the user's record (if present)."""

    def replace(self, *, user_id: int, token_hash: str, expires_at: datetime) -> None:
        """Create the user's record or overwrite the existing one."""

    def consume(self, *, user_id: int, token_hash: str) -> bool:
        """
        Delete the user's record iff it currently holds ``token_hash``.

        :returns: ``True`` when this call removed the record.
        """

    def delete(self, user_id: int) -> bool:
        """Delete the user's record. :returns: True if it existed."""


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-memory refresh-token store.

    .. note::
       Uses a threading lock so ``consume`` is atomic across threads.
    """

    def __init__(self) -> None:
        self._by_user: dict[int, RefreshRecordView] = {}
        self._lock = threading.Lock()

    def get(self, user_id: int) -> RefreshRecordView | None:
        with self._lock:
            return self._by_user.get(user_id)

    def replace(self, *, user_id: int, token_hash: str, expires_at: datetime) -> None:
        with self._lock:
            self._by_user[user_id] = RefreshRecordView(
                user_id=user_id, token_hash=token_hash, expires_at=expires_at
            )

    def consume(self, *, user_id: int, token_hash: str) -> bool:
        with self._lock:
            current = self._by_user.get(user_id)
            if current is None or current.token_hash != token_hash:
                return False
            del self._by_user[user_id]
            return True

    def delete(self, user_id: int) -> bool:
        with self._lock:
            return self._by_user.pop(user_id, None) is not None

    def __len__(self) -> int:
        return len(self._by_user)
