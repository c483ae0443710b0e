"""Resolve the acting user for commands that need an identity."""

from __future__ import annotations

import click

from checkout.domain.exceptions import StorageError
from checkout.domain.model.user import User
from checkout.infrastructure.bootstrap import user_repository

user_id_option = click.option(
    "--user-id", "user_id", required=True, type=int, help="ID of the acting user."
)


def requester(user_id: int) -> User:
    try:
        user = user_repository().get_by_id(user_id)
    except StorageError as exc:
        raise click.ClickException(f"Cannot look up user #{user_id}: {exc}")
    if user is None:
        raise click.ClickException(f"Unknown user #{user_id}")
    return user
