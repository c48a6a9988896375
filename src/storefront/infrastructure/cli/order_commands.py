"""CLI commands for the Order aggregate."""

from __future__ import annotations

import json

import click

from storefront.application.dto import (
    order_listing_to_dict,
    order_to_dict,
    parse_new_order,
)
from storefront.domain.model.order import Order, OrderStatus
from storefront.infrastructure.cli.runtime import echo_json, run_use_case


def _display_order(order: Order) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{order.id}  (status={order.status.value})")
    click.echo(f"User:     {order.user_id}")
    click.echo(f"Created:  {order.created_at.strftime('%Y-%m-%d %H:%M UTC')}")
    if order.delivered_at:
        click.echo(f"Delivered: {order.delivered_at.strftime('%Y-%m-%d %H:%M UTC')}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in order.items:
        click.echo(
            f"  {item.name:<20} {item.quantity.value:>5} "
            f"{str(item.unit_price):>10} {str(item.line_total):>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Items':<27} {str(order.items_price):>20}")
    click.echo(f"  {'Tax':<27} {str(order.tax_price):>20}")
    click.echo(f"  {'Shipping':<27} {str(order.shipping_price):>20}")
    click.echo(f"  {'Order Total':<27} {str(order.total_price):>20}")


@click.command("create")
@click.option(
    "--file",
    "payload_file",
    type=click.File("r", encoding="utf-8"),
    default="-",
    help="Order JSON (shippingInfo, orderItems, paymentInfo, prices). Defaults to stdin.",
)
def order_create(payload_file) -> None:
    """Place a new order for the signed-in user."""
    try:
        payload = json.load(payload_file)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"Invalid JSON: {exc}")

    def _create(app, token):
        request = parse_new_order(payload)
        return app.create_order.handle(
            token,
            items=request.items,
            shipping_info=request.shipping_info,
            payment_info=request.payment_info,
            items_price=request.items_price,
            tax_price=request.tax_price,
            shipping_price=request.shipping_price,
            total_price=request.total_price,
        )

    order = run_use_case(_create)
    click.echo(f"Order #{order.id} created  (status={order.status.value})")
    _display_order(order)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.option("--json", "as_json", is_flag=True, help="Print the raw order document.")
def order_show(order_id: int, as_json: bool) -> None:
    """Show details of one of your orders (admins: any order)."""
    order = run_use_case(lambda app, token: app.show_order.handle(token, order_id))
    if as_json:
        echo_json(order_to_dict(order))
    else:
        _display_order(order)


@click.command("mine")
def order_mine() -> None:
    """List the signed-in user's orders."""
    orders = run_use_case(lambda app, token: app.list_my_orders.handle(token))
    if not orders:
        click.echo("No orders found.")
        return
    for order in orders:
        click.echo(f"#{order.id:<6} {order.status.value:<10} {str(order.total_price):>12}")


@click.command("list")
@click.option("--json", "as_json", is_flag=True, help="Print orders and totalAmount as JSON.")
def order_list(as_json: bool) -> None:
    """List all orders with total revenue (admin)."""
    listing = run_use_case(lambda app, token: app.list_all_orders.handle(token))
    if as_json:
        echo_json(order_listing_to_dict(listing.orders, listing.total_revenue))
        return

    click.echo(f"{'Order':<8} {'User':<34} {'Status':<10} {'Total':>12}")
    click.echo("-" * 67)
    for order in listing.orders:
        click.echo(
            f"#{order.id:<7} {order.user_id:<34} {order.status.value:<10} "
            f"{str(order.total_price):>12}"
        )
    click.echo("-" * 67)
    click.echo(f"{'Revenue (excluding cancelled)':<54} {str(listing.total_revenue):>12}")


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--status",
    required=True,
    type=click.Choice([s.value for s in OrderStatus]),
    help="New status.",
)
def order_status(order_id: int, status: str) -> None:
    """Move an order along Pending -> Shipped -> Delivered, or cancel it (admin)."""
    order = run_use_case(
        lambda app, token: app.update_order_status.handle(token, order_id, status)
    )
    click.echo(f"Order #{order_id} is now {order.status.value}.")


@click.command("delete")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to delete.")
@click.confirmation_option(prompt="Permanently delete this order?")
def order_delete(order_id: int) -> None:
    """Delete an order (admin)."""
    run_use_case(lambda app, token: app.delete_order.handle(token, order_id))
    click.echo(f"Order #{order_id} deleted.")
