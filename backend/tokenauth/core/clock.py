"""Time sources injected into token encoding and verification."""

from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Port returning the current instant as a timezone-aware UTC datetime."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall-clock time."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FrozenClock:
    """
    Deterministic clock that only moves when told to.

    Used by tests and by tooling that needs to mint tokens "as of" a fixed
    instant.

    :param start: Initial instant (naive values are labelled UTC).
    """

    def __init__(self, start: datetime | None = None) -> None:
        moment = start or datetime(2024, 1, 1, tzinfo=UTC)
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
        self._now = moment
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def advance(self, delta: timedelta) -> datetime:
        """Move the clock forward by ``delta`` and return the new instant."""
        with self._lock:
            self._now = self._now + delta
            return self._now

    def set(self, moment: datetime) -> None:
        with self._lock:
            self._now = moment if moment.tzinfo else moment.replace(tzinfo=UTC)


__all__ = ["Clock", "SystemClock", "FrozenClock"]
