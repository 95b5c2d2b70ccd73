"""Factory Boy definition for :class:`tokenauth.models.user.User`."""

from __future__ import annotations

import factory

from tests.factories import BaseFactory
from tokenauth.models.user import User

DEFAULT_PASSWORD = "Passw0rd!"


class UserFactory(BaseFactory):
    """Build persisted :class:`tokenauth.models.user.User` instances."""

    class Meta:
        model = User

    id = None  # let autoincrement handle it
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    password = DEFAULT_PASSWORD  # model setter hashes it
