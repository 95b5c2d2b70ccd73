"""
DTOs for IdentityService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserRegisterIn:
    """
    Input DTO for user registration.

    :param email: Login email (normalized to lowercase by the model).
    :type email: str
    :param password: Raw password to be hashed by the model.
    :type password: str
    """

    email: str
    password: str


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Output DTO representing public-safe user data.

    :param id: User identifier.
    :type id: int
    :param email: Email address.
    :type email: str
    :param created_at: Registration timestamp.
    :type created_at: datetime | None
    """

    id: int
    email: str
    created_at: datetime | None = None
