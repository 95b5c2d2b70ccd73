# comments in English; reST docstrings
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from tokenauth.services._shared.ports import RefreshRecordView, RefreshTokenStore
from tokenauth.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


def _aware(dt: datetime) -> datetime:
    # SQLite drops tzinfo on the way back; stored values are always UTC.
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=UTC)


@dataclass(slots=True)
class SQLAlchemyRefreshTokenStore(RefreshTokenStore):
    """
    Relational refresh-token store (table ``refresh_tokens``).

    Every call runs in its own Unit of Work and commits on success.
    ``consume`` is one conditional ``DELETE``; the database decides the
    winner of concurrent attempts through the affected row count.

    :param uow_factory: Builds the Unit of Work (overridable in tests).
    """

    uow_factory: Callable[[], SQLAlchemyUnitOfWork] = field(default=SQLAlchemyUnitOfWork)

    def get(self, user_id: int) -> RefreshRecordView | None:
        with self.uow_factory() as uow:
            record = uow.refresh_tokens.get_by_user(user_id)
            if record is None:
                return None
            return RefreshRecordView(
                user_id=record.user_id,
                token_hash=record.token_hash,
                expires_at=_aware(record.expires_at),
            )

    def replace(self, *, user_id: int, token_hash: str, expires_at: datetime) -> None:
        with self.uow_factory() as uow:
            uow.refresh_tokens.upsert(
                user_id=user_id,
                token_hash=token_hash,
                expires_at=_aware(expires_at),
            )

    def consume(self, *, user_id: int, token_hash: str) -> bool:
        with self.uow_factory() as uow:
            return uow.refresh_tokens.delete_if_matches(user_id=user_id, token_hash=token_hash)

    def delete(self, user_id: int) -> bool:
        with self.uow_factory() as uow:
            return uow.refresh_tokens.delete_for_user(user_id)
