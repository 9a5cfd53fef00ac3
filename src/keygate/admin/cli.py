"""
keygate.admin.cli

`keygate-admin`: manage callers and providers, inspect and prune the access log.

Responsibilities:
- Map commands (and their short aliases) onto `RegistryAdmin` operations.
- Own the engine lifetime for a single command invocation.
- Print plain, tab-separated output suitable for shell pipelines.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Awaitable, Callable
from datetime import UTC
from typing import TypeVar

import typer

from keygate.admin.registry import RegistryAdmin, RegistryError
from keygate.db.init_db import init_db
from keygate.db.session import create_engine, create_sessionmaker
from keygate.observability.logging import configure_logging
from keygate.settings import get_settings

T = TypeVar("T")

ERROR_EXIT_CODE = 1

app = typer.Typer(
    no_args_is_help=True,
    help="Manage database for proxy users and model providers",
)


@app.callback()
def _configure() -> None:
    settings = get_settings()
    # stdout carries command output; logs go to stderr.
    configure_logging(
        service_name=f"{settings.service_name}-admin",
        level=settings.log_level,
        stream=sys.stderr,
        json_logs=False,
    )


def _run(op: Callable[[RegistryAdmin], Awaitable[T]]) -> T:
    async def _main() -> T:
        engine = create_engine(get_settings())
        try:
            await init_db(engine)
            return await op(RegistryAdmin(create_sessionmaker(engine)))
        finally:
            await engine.dispose()

    try:
        return asyncio.run(_main())
    except RegistryError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=ERROR_EXIT_CODE) from exc


def _not_found(kind: str, key: str) -> None:
    typer.echo(f"error: no {kind} {key!r}", err=True)
    raise typer.Exit(code=ERROR_EXIT_CODE)


def add_user(
    user_id: str = typer.Option(..., "--user-id", help="User's email as user id"),
    user_name: str = typer.Option(..., "--user-name", help="User Name"),
) -> None:
    """Add a new user and print the issued API key."""
    caller = _run(lambda admin: admin.add_caller(caller_id=user_id, display_name=user_name))
    typer.echo("User added successfully!")
    typer.echo("--------------User Info-------------")
    typer.echo(f"User ID: {caller.id}")
    typer.echo(f"User Name: {caller.display_name}")
    typer.echo(f"API Key: {caller.credential}")


def list_users() -> None:
    """List all users."""
    for caller in _run(lambda admin: admin.list_callers()):
        typer.echo(f"{caller.id}\t{caller.display_name}\t{caller.credential}")


def delete_user(
    user_id: str = typer.Option(..., "--user-id", help="User ID"),
) -> None:
    """Delete a user by user ID."""
    if not _run(lambda admin: admin.delete_caller(user_id)):
        _not_found("user", user_id)
    typer.echo("User deleted successfully!")


def add_provider(
    provider_name: str = typer.Option(..., "--provider-name", help="Provider Name"),
    api_url: str = typer.Option(..., "--api-url", help="API URL"),
    api_key: str = typer.Option(..., "--api-key", help="API Key"),
) -> None:
    """Add a new provider."""
    _run(
        lambda admin: admin.add_provider(name=provider_name, base_url=api_url, credential=api_key)
    )
    typer.echo("Provider added successfully!")


def list_providers() -> None:
    """List all providers."""
    providers = _run(lambda admin: admin.list_providers())
    typer.echo("Provider Name\tAPI URL\tAPI Key")
    for provider in providers:
        typer.echo(f"{provider.name}\t{provider.base_url}\t{provider.credential}")


def delete_provider(
    provider_name: str = typer.Option(..., "--provider-name", help="Provider Name"),
) -> None:
    """Delete a provider by provider name."""
    if not _run(lambda admin: admin.delete_provider(provider_name)):
        _not_found("provider", provider_name)
    typer.echo("Provider deleted successfully!")


@app.command("list-logs")
def list_logs(
    lines: int = typer.Option(100, "--lines", min=1, help="Number of lines to view"),
    user_id: str | None = typer.Option(None, "--user-id", help="Filter logs by user ID"),
) -> None:
    """View recent logs, newest first."""
    entries = _run(lambda admin: admin.recent_access(limit=lines, caller_id=user_id))
    for entry in entries:
        # Stored as naive UTC; shown in the operator's local time.
        local = entry.created_at.replace(tzinfo=UTC).astimezone()
        typer.echo(f"{entry.caller_id}\t{local:%Y-%m-%d %H:%M:%S}\t{entry.path}")


@app.command("del-logs")
def del_logs(
    days: int = typer.Option(30, "--days", help="Number of days to retain logs"),
) -> None:
    """Delete logs older than the retention window."""
    deleted = _run(lambda admin: admin.prune_access(days=days))
    typer.echo(f"Deleted {deleted} log entries older than {days} days")


# Long names are listed in --help; the short aliases are hidden duplicates.
for _name, _alias, _fn in (
    ("add-user", "au", add_user),
    ("list-users", "lu", list_users),
    ("delete-user", "du", delete_user),
    ("add-provider", "ap", add_provider),
    ("list-providers", "lp", list_providers),
    ("delete-provider", "dp", delete_provider),
):
    app.command(_name)(_fn)
    app.command(_alias, hidden=True)(_fn)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
