"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from storefront.application.dto import product_to_dict
from storefront.infrastructure.cli.runtime import echo_json, run_use_case


@click.command("init")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, type=int, help="Price in whole currency units.")
@click.option("--description", default="", help="Product description.")
@click.option("--category", default="", help="Product category.")
@click.option("--stock", default=0, type=click.IntRange(min=0), help="Units in stock.")
@click.option("--image", "images", multiple=True, help="Image reference (repeatable).")
def product_init(
    name: str,
    price: int,
    description: str,
    category: str,
    stock: int,
    images: tuple[str, ...],
) -> None:
    """Create the master product record (admin)."""
    product = run_use_case(
        lambda app, token: app.init_product.handle(
            token,
            name=name,
            price=price,
            description=description,
            category=category,
            stock=stock,
            images=list(images),
        )
    )
    click.echo(f"Product #{product.id} '{product.name}' added at {product.price}")


@click.command("show")
@click.option("--id", "product_id", default="1", show_default=True, help="Product ID.")
def product_show(product_id: str) -> None:
    """Show a product, including stock and sales."""
    product = run_use_case(lambda app, _: app.show_product.handle(product_id))
    echo_json(product_to_dict(product))


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", type=int, default=None, help="New price.")
@click.option("--stock", type=click.IntRange(min=0), default=None, help="New stock level.")
@click.option("--description", default=None, help="New description.")
@click.option("--category", default=None, help="New category.")
def product_update(
    product_id: str,
    price: int | None,
    stock: int | None,
    description: str | None,
    category: str | None,
) -> None:
    """Edit a product (admin)."""
    product = run_use_case(
        lambda app, token: app.update_product.handle(
            token,
            product_id=product_id,
            price=price,
            stock=stock,
            description=description,
            category=category,
        )
    )
    click.echo(f"Product #{product.id} updated.")
