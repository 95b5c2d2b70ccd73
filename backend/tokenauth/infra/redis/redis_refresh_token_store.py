# comments in English; reST docstrings
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

import redis  # type: ignore[import-untyped]

from tokenauth.core.clock import Clock, SystemClock
from tokenauth.services._shared.ports import RefreshRecordView, RefreshTokenStore


def _s(value: bytes | str | None, default: str = "") -> str:
    if value is None:
        return default
    return value.decode() if isinstance(value, bytes | bytearray) else str(value)


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh-token store.

    Layout: one hash per user at ``rt:u:{user_id}`` with fields
    ``token_hash`` and ``expires_at`` (epoch seconds). The key carries a TTL
    so expired records disappear on their own.

    :param r: A Redis client (already connected).
    :param clock: Time source used to compute key TTLs.
    """

    r: redis.Redis
    clock: Clock = field(default_factory=SystemClock)

    # -------------------- helpers --------------------

    @staticmethod
    def _ku(user_id: int) -> str:
        return f"rt:u:{user_id}"

    @staticmethod
    def _to_ts(dt: datetime) -> int:
        # naive values are labelled UTC (no conversion)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return int(dt.timestamp())

    # -------------------- API ------------------------

    def get(self, user_id: int) -> RefreshRecordView | None:
        h = self.r.hgetall(self._ku(user_id))
        if not h:
            return None
        fields = {_s(k): _s(v) for k, v in h.items()}
        return RefreshRecordView(
            user_id=user_id,
            token_hash=fields.get("token_hash", ""),
            expires_at=datetime.fromtimestamp(int(fields.get("expires_at", "0")), tz=UTC),
        )

    def replace(self, *, user_id: int, token_hash: str, expires_at: datetime) -> None:
        key = self._ku(user_id)
        exp_ts = self._to_ts(expires_at)
        ttl = max(1, exp_ts - self._to_ts(self.clock.now()))

        pipe = self.r.pipeline(transaction=True)
        # delete first so no stale field survives the overwrite
        pipe.delete(key)
        pipe.hset(key, mapping={"token_hash": token_hash, "expires_at": str(exp_ts)})
        pipe.expire(key, ttl)
        pipe.execute()

    def consume(self, *, user_id: int, token_hash: str) -> bool:
        """
        Compare-and-delete with WATCH/MULTI/EXEC.

        If another client touches the key between the read and ``EXEC`` the
        transaction aborts with :class:`redis.WatchError` and the check is
        retried against the new state.
        """
        key = self._ku(user_id)
        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(key)
                    current = p.hget(key, "token_hash")
                    if current is None or _s(current) != token_hash:
                        p.unwatch()
                        return False
                    p.multi()
                    p.delete(key)
                    p.execute()
                return True
            except redis.WatchError:
                continue

    def delete(self, user_id: int) -> bool:
        return bool(self.r.delete(self._ku(user_id)))
