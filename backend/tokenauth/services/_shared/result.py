"""
Tagged result variants for expected outcomes.

A service returns ``Ok(value)`` on success and ``Err(error)`` on an expected
failure (bad credentials, expired token, ...). Callers branch with
``isinstance`` or ``is_ok``; a result never carries both a value and an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying ``value``."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed outcome carrying a typed ``error``."""

    error: E

    @property
    def is_ok(self) -> bool:
        return False


Result: TypeAlias = Ok[T] | Err[E]

__all__ = ["Ok", "Err", "Result"]
