"""CLI commands for users."""

from __future__ import annotations

import click

from checkout.application.register_user import RegisterUserHandler
from checkout.domain.exceptions import DomainException
from checkout.infrastructure.bootstrap import user_repository


@click.command("add")
@click.option("--username", required=True, help="Login name.")
@click.option("--first-name", required=True, help="First name.")
@click.option("--last-name", required=True, help="Last name.")
@click.option("--email", required=True, help="Email address.")
@click.option("--admin", is_flag=True, default=False, help="Grant the Admin role.")
def user_add(username: str, first_name: str, last_name: str, email: str, admin: bool) -> None:
    """Register a user."""
    handler = RegisterUserHandler(user_repo=user_repository())

    try:
        user = handler.handle(
            username=username,
            first_name=first_name,
            last_name=last_name,
            email=email,
            admin=admin,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"User #{user.id} '{user.username}' added (role={user.role.value})")
