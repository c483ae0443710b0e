"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from checkout.application.dto import InvoiceDTO, OrderDTO, OrderLineRequest
from checkout.application.list_orders import ListOrdersHandler
from checkout.application.place_order import PlaceOrderHandler
from checkout.application.show_invoice import ShowInvoiceHandler
from checkout.application.show_order import ShowOrderHandler
from checkout.domain.exceptions import DomainException
from checkout.infrastructure.bootstrap import (
    invoice_sequencer,
    order_repository,
    reservation_engine,
    user_repository,
)
from checkout.infrastructure.cli._identity import requester, user_id_option


def _parse_items(raw: str) -> list[OrderLineRequest]:
    """Parse '3,5:1' into OrderLineRequest list (quantity defaults to 1)."""
    lines: list[OrderLineRequest] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        id_str, _, qty_str = pair.partition(":")
        try:
            item_id = int(id_str)
            qty = int(qty_str) if qty_str else 1
        except ValueError:
            raise click.BadParameter(
                f"Invalid item '{pair}'. Expected 'ItemId' or 'ItemId:Quantity'."
            )
        lines.append(OrderLineRequest(item_id=item_id, quantity=qty))
    return lines


def _display_lines(items) -> None:
    click.echo(f"  {'Item':<6} {'Title':<28} {'Artist':<20} {'Qty':>4} {'Price':>12} {'Subtotal':>12}")
    click.echo(f"  {'-'*87}")
    for item in items:
        click.echo(
            f"  {item.item_id:<6} {item.title:<28} {item.artist:<20} "
            f"{item.quantity:>4} {item.price:>12} {item.subtotal:>12}"
        )
    click.echo(f"  {'-'*87}")


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Invoice:  {dto.invoice_number}")
    click.echo(f"Buyer:    #{dto.buyer_id}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo(f"Ship to:  {dto.shipping_address}")
    click.echo(f"Payment:  {dto.payment_method}")
    click.echo()
    _display_lines(dto.items)
    click.echo(f"  {'Order Total':<60} {dto.total:>27}")


@click.command("place")
@user_id_option
@click.option("--items", required=True, help="Catalog item IDs as 'Id,Id' or 'Id:Qty,Id:Qty'.")
@click.option("--address", required=True, help="Shipping address.")
@click.option("--payment", required=True, help="Payment method, e.g. 'Credit Card'.")
def order_place(user_id: int, items: str, address: str, payment: str) -> None:
    """Place an order for one or more catalog items."""
    lines = _parse_items(items)

    try:
        handler = PlaceOrderHandler(
            order_repo=order_repository(),
            user_repo=user_repository(),
            reservation_engine=reservation_engine(),
            invoice_sequencer=invoice_sequencer(),
        )
        dto = handler.handle(
            buyer_id=user_id,
            shipping_address=address,
            payment_method=payment,
            lines=lines,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} placed  (invoice={dto.invoice_number}, status={dto.status})")
    click.echo()
    _display_lines(dto.items)
    click.echo(f"  {'Order Total':<60} {dto.total:>27}")


@click.command("show")
@user_id_option
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(user_id: int, order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(requester(user_id), order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@user_id_option
def order_list(user_id: int) -> None:
    """List orders visible to the acting user."""
    handler = ListOrdersHandler(order_repo=order_repository())

    try:
        dtos = handler.handle(requester(user_id))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not dtos:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Invoice':<18} {'Buyer':>6} {'Status':<10} {'Total':>12}")
    click.echo("-" * 56)
    for dto in dtos:
        click.echo(
            f"{dto.id:<6} {dto.invoice_number:<18} {dto.buyer_id:>6} {dto.status:<10} {dto.total:>12}"
        )


def _display_invoice(dto: InvoiceDTO) -> None:
    click.echo(f"Invoice {dto.invoice_number}")
    click.echo(f"Date:     {dto.invoice_date}")
    click.echo(f"Customer: {dto.customer_name} <{dto.customer_email}>")
    click.echo(f"Ship to:  {dto.shipping_address}")
    click.echo(f"Payment:  {dto.payment_method}")
    click.echo()
    _display_lines(dto.items)
    click.echo(f"  {'Subtotal':<60} {dto.subtotal:>27}")
    click.echo(f"  {'Tax (8%)':<60} {dto.tax:>27}")
    click.echo(f"  {'Total':<60} {dto.total:>27}")


@click.command("invoice")
@user_id_option
@click.option("--id", "order_id", required=True, type=int, help="Order ID to invoice.")
def order_invoice(user_id: int, order_id: int) -> None:
    """Show the invoice for an order."""
    handler = ShowInvoiceHandler(
        order_repo=order_repository(),
        user_repo=user_repository(),
    )

    try:
        dto = handler.handle(requester(user_id), order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_invoice(dto)
