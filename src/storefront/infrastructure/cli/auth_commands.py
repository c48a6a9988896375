"""CLI commands for sessions and accounts."""

from __future__ import annotations

import click

from storefront.application.dto import user_to_dict
from storefront.infrastructure.cli.runtime import (
    clear_token,
    echo_json,
    run_use_case,
    store_token,
)


@click.command("register")
@click.option("--email", required=True, help="Account email.")
@click.option("--name", required=True, help="Display name.")
@click.password_option(help="Account password.")
def auth_register(email: str, name: str, password: str) -> None:
    """Create a customer account and sign in."""
    user, token = run_use_case(
        lambda app, _: app.register_user.handle(email=email, name=name, password=password)
    )
    store_token(token)
    click.echo(f"Registered {user.email} (role={user.role.value}) and signed in.")


@click.command("login")
@click.option("--email", required=True, help="Account email.")
@click.option("--password", prompt=True, hide_input=True, help="Account password.")
def auth_login(email: str, password: str) -> None:
    """Sign in and store the session token."""
    user, token = run_use_case(lambda app, _: app.login_user.handle(email, password))
    store_token(token)
    click.echo(f"Signed in as {user.name} <{user.email}>.")


@click.command("logout")
def auth_logout() -> None:
    """Discard the stored session token."""
    if clear_token():
        click.echo("Logged Out Successfully")
    else:
        click.echo("No active session.")


@click.command("whoami")
def auth_whoami() -> None:
    """Show the signed-in user."""
    user = run_use_case(lambda app, token: app.show_profile.handle(token))
    echo_json(user_to_dict(user))


@click.command("password")
@click.option("--old", "old_password", prompt="Current password", hide_input=True)
@click.option(
    "--new",
    "new_password",
    prompt="New password",
    hide_input=True,
    confirmation_prompt=True,
)
def auth_password(old_password: str, new_password: str) -> None:
    """Change the signed-in user's password."""
    run_use_case(lambda app, token: app.change_password.handle(token, old_password, new_password))
    click.echo("Password updated.")
