import click

from storefront.infrastructure.cli.auth_commands import (
    auth_login,
    auth_logout,
    auth_password,
    auth_register,
    auth_whoami,
)
from storefront.infrastructure.cli.order_commands import (
    order_create,
    order_delete,
    order_list,
    order_mine,
    order_show,
    order_status,
)
from storefront.infrastructure.cli.product_commands import (
    product_init,
    product_show,
    product_update,
)
from storefront.infrastructure.cli.user_commands import (
    user_bootstrap_admin,
    user_list,
    user_role,
)


@click.group()
def cli() -> None:
    """Storefront: orders, stock and accounts."""


@cli.group()
def auth() -> None:
    """Sign in, sign out, manage your account."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage the product."""


@cli.group()
def user() -> None:
    """Manage users."""


# Register subcommands
auth.add_command(auth_login)
auth.add_command(auth_logout)
auth.add_command(auth_password)
auth.add_command(auth_register)
auth.add_command(auth_whoami)
order.add_command(order_create)
order.add_command(order_delete)
order.add_command(order_list)
order.add_command(order_mine)
order.add_command(order_show)
order.add_command(order_status)
product.add_command(product_init)
product.add_command(product_show)
product.add_command(product_update)
user.add_command(user_bootstrap_admin)
user.add_command(user_list)
user.add_command(user_role)
