"""CLI commands for the CatalogItem aggregate."""

from __future__ import annotations

import click

from checkout.application.add_catalog_item import AddCatalogItemHandler
from checkout.application.restore_item import RestoreItemHandler
from checkout.domain.exceptions import DomainException, StorageError
from checkout.infrastructure.bootstrap import catalog_repository, reservation_engine
from checkout.infrastructure.cli._identity import requester, user_id_option


@click.command("add")
@click.option("--title", required=True, help="Title of the work.")
@click.option("--artist", required=True, help="Artist name.")
@click.option("--price", required=True, help="Price (e.g. 150.00).")
def catalog_add(title: str, artist: str, price: str) -> None:
    """Add a new item to the catalog."""
    handler = AddCatalogItemHandler(catalog_repo=catalog_repository())

    try:
        item = handler.handle(title=title, artist=artist, price=price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item #{item.id} '{item.title}' by {item.artist} added at {item.price}")


@click.command("list")
def catalog_list() -> None:
    """List all catalog items."""
    try:
        items = catalog_repository().list_all()
    except StorageError as exc:
        raise click.ClickException(str(exc))

    if not items:
        click.echo("No catalog items found.")
        return

    click.echo(f"{'ID':<6} {'Title':<28} {'Artist':<20} {'Price':>12} {'Status':>10}")
    click.echo("-" * 80)
    for item in items:
        status = "available" if item.is_available else "sold"
        click.echo(
            f"{item.id:<6} {item.title:<28} {item.artist:<20} {str(item.price):>12} {status:>10}"
        )


@click.command("restore")
@user_id_option
@click.option("--id", "item_id", required=True, type=int, help="Catalog item ID.")
def catalog_restore(user_id: int, item_id: int) -> None:
    """Put a reserved item back on sale (admin only)."""
    handler = RestoreItemHandler(reservation_engine=reservation_engine())

    try:
        restored = handler.handle(requester(user_id), item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if restored:
        click.echo(f"Item #{item_id} is available again.")
    else:
        click.echo(f"Item #{item_id} was already available.")
