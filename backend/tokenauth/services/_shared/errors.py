"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never depend on Flask or HTTP.
They cover unexpected or non-token conditions (missing users, uniqueness,
ownership). Expected token and credential failures are *not* exceptions:
they travel as :class:`~tokenauth.services._shared.result.Err` values.

The translation to HTTP responses (RFC 7807) is handled by
``tokenauth/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError mentions the constraint (PostgreSQL) or,
        for SQLite, the constrained column.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    if constraint_name.lower() in message:
        return True
    # SQLite reports "UNIQUE constraint failed: users.email"
    table_col = constraint_name.lower().removeprefix("uq_").replace("_", ".", 1)
    return table_col in message


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer or BaseService translates them to APIError.
    """


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :param key: Identifier or search key.
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"Couldn't find {self.entity} with 'id'={self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :param detail: Short human-readable explanation.
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"{self.entity} {self.detail}"


class AuthorizationError(ServiceError):
    """Raised when an authenticated actor may not act on a resource."""

    def __init__(self, message: str = "You are not allowed to perform this action") -> None:
        super().__init__(message)
