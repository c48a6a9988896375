"""Glue between synchronous click commands and the async use cases.

``run_use_case`` builds the application, starts the notification bus,
awaits one use case and shuts the bus down again. The current session
token lives in a file under the data directory, readable only by its
owner, which stands in for the browser's HTTP-only cookie.
"""

from __future__ import annotations

import asyncio
import json
import os
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import click

from storefront.config import Settings
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import Storefront, build_storefront
from storefront.infrastructure.logging import configure_logging

T = TypeVar("T")


def load_settings() -> Settings:
    settings = Settings.from_env()
    configure_logging(settings)
    return settings


def run_use_case(call: Callable[[Storefront, str | None], Awaitable[T]]) -> T:
    """Run *call* with a started Storefront and the stored session token."""
    settings = load_settings()
    try:
        app = build_storefront(settings)
    except RuntimeError as exc:
        raise click.ClickException(str(exc))

    async def _main() -> T:
        await app.start()
        try:
            return await call(app, read_token(settings))
        finally:
            await app.shutdown()

    try:
        return asyncio.run(_main())
    except DomainException as exc:
        raise click.ClickException(str(exc))


# --- Session token ("cookie") ---------------------------------------------------


def read_token(settings: Settings) -> str | None:
    path = settings.session_file
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8").strip() or None


def store_token(token: str) -> None:
    path = load_settings().session_file
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as fh:
        fh.write(token)


def clear_token() -> bool:
    path = load_settings().session_file
    if path.exists():
        path.unlink()
        return True
    return False


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))
