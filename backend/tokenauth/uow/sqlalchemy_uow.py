"""
SQLAlchemy implementations of the Unit of Work for Flask.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import Connection
from sqlalchemy.orm import Session, SessionTransaction

from tokenauth.core.extensions import db
from tokenauth.repositories import RefreshTokenRepository, UserRepository
from tokenauth.uow.base import UnitOfWork


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.refresh_tokens = RefreshTokenRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    SQLAlchemy-backed UoW using the Flask-scoped session.

    Commits when the block exits cleanly, rolls back otherwise.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # No-op: the session is lazily started on the first statement.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only scope over the current app context's session.

    Inside the block an ORM flush with pending changes, or any statement that
    starts with a write verb, raises ``RuntimeError``. A transaction opened
    here is always rolled back on exit; when the session is already inside
    one, the scope joins it and leaves it open.
    """

    _WRITE_VERBS = frozenset(
        {"insert", "update", "delete", "replace", "merge", "create", "alter", "drop", "truncate"}
    )

    def __init__(self) -> None:
        # The concrete session, so the flush guard stays local to it.
        super().__init__(session=db.session())
        self._owned: SessionTransaction | None = None
        self._bind: Connection | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        self._owned = None if self.session.in_transaction() else self.session.begin()
        self._bind = self.session.connection()
        event.listen(self.session, "before_flush", self._block_flush)
        event.listen(self._bind, "before_cursor_execute", self._block_write)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            event.remove(self.session, "before_flush", self._block_flush)
            if self._bind is not None:
                event.remove(self._bind, "before_cursor_execute", self._block_write)
        finally:
            self._bind = None
            if self._owned is not None:
                self._owned = None
                self.session.rollback()

    def commit(self) -> None:
        """
        Disallow commit in read-only Unit of Work.

        :raises RuntimeError: always, to prevent accidental writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ----------------------------- Guards ---------------------------------

    @staticmethod
    def _block_flush(session: Session, flush_context: Any, instances: Any) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError("Read-only UnitOfWork: ORM flush blocked (pending changes).")

    def _block_write(
        self,
        conn: Connection,
        cursor: Any,
        statement: str,
        parameters: Any,
        context: Any,
        executemany: bool,
    ) -> None:
        verb = statement.split(None, 1)[0].lower() if statement.strip() else ""
        if verb in self._WRITE_VERBS:
            raise RuntimeError(f"Read-only UnitOfWork: SQL statement blocked: {verb.upper()}")
