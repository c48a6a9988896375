"""CLI commands for user administration."""

from __future__ import annotations

import click

from storefront.application.dto import user_to_dict
from storefront.infrastructure.cli.runtime import echo_json, run_use_case


@click.command("list")
def user_list() -> None:
    """List all users (admin)."""
    users = run_use_case(lambda app, token: app.list_users.handle(token))

    if not users:
        click.echo("No users found.")
        return

    click.echo(f"{'ID':<34} {'Email':<30} {'Name':<20} {'Role':<6}")
    click.echo("-" * 93)
    for u in users:
        click.echo(f"{u.id:<34} {u.email:<30} {u.name:<20} {u.role.value:<6}")


@click.command("role")
@click.option("--id", "user_id", required=True, help="User ID.")
@click.option("--role", required=True, type=click.Choice(["user", "admin"]), help="New role.")
def user_role(user_id: str, role: str) -> None:
    """Change a user's role (admin)."""
    user = run_use_case(lambda app, token: app.update_user_role.handle(token, user_id, role))
    echo_json(user_to_dict(user))


@click.command("bootstrap-admin")
@click.option("--email", required=True, help="Email of the user to promote.")
def user_bootstrap_admin(email: str) -> None:
    """Promote the first admin (only while no admin exists)."""
    user = run_use_case(lambda app, _: app.bootstrap_admin.handle(email))
    click.echo(f"{user.email} is now an admin.")
