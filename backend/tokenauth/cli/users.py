"""Flask CLI commands for operator-level account management."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from tokenauth.api.deps import get_identity_service
from tokenauth.services._shared.errors import ServiceError
from tokenauth.services.identity import UserRegisterIn

LOGGER = logging.getLogger(__name__)


@click.group("users")
def users_cli() -> None:
    """Create and remove user accounts."""


@users_cli.command("create")
@click.argument("email")
@click.password_option(help="Password for the new account.")
@with_appcontext
def create_user(email: str, password: str) -> None:
    """Register EMAIL with a password (prompted when omitted)."""
    try:
        user = get_identity_service().register_user(UserRegisterIn(email=email, password=password))
    except (ServiceError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Created user {user.id} <{user.email}>")


@users_cli.command("delete")
@click.argument("email")
@click.confirmation_option(prompt="Delete this user and their refresh token?")
@with_appcontext
def delete_user(email: str) -> None:
    """Delete the user registered as EMAIL."""
    try:
        user_id = get_identity_service().purge_user(email)
    except ServiceError as exc:
        raise click.ClickException(str(exc)) from exc
    LOGGER.info("User removed from CLI", extra={"user_id": user_id})
    click.echo(f"Deleted user {user_id}")
