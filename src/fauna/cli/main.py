"""
CLI for the Fauna client.

Commands:
    fauna get REF - Fetch a resource through the cache and print it
    fauna config - Show current configuration
    fauna version - Print version
"""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from fauna import __version__
from fauna import client as fauna_client
from fauna.config import Settings, clear_settings_cache, get_settings
from fauna.connection import Connection
from fauna.exceptions import FaunaError
from fauna.logging import setup_logging

app = typer.Typer(
    name="fauna",
    help="Fauna - cached REST client for the Fauna API",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)


def _get_settings_safe() -> Settings | None:
    """Get settings, returning None if configuration is invalid."""
    try:
        clear_settings_cache()
        return get_settings()
    except ValueError:
        return None


def _parse_params(values: list[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {item!r}", param_hint="--param")
        params[key] = value
    return params


@app.command()
def get(
    ref: Annotated[str, typer.Argument(help="Reference to fetch (e.g. users/123)")],
    param: Annotated[
        Optional[list[str]],
        typer.Option("--param", "-p", help="Query parameter as key=value (repeatable)"),
    ] = None,
) -> None:
    """Fetch a resource and print it as JSON."""
    settings = _get_settings_safe()
    if settings is None:
        error_console.print(
            "[red]Error:[/red] Configuration is invalid. "
            "Run 'fauna config' to see what's wrong."
        )
        raise typer.Exit(1)

    setup_logging(settings.LOG_LEVEL)
    query = _parse_params(param or [])

    try:
        with Connection() as connection, fauna_client.context(connection):
            resource = fauna_client.get(ref, query)
    except FaunaError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if resource is None:
        console.print("[dim]No resource returned.[/dim]")
        return
    console.print_json(data=resource)


@app.command()
def config() -> None:
    """Show current configuration.

    Displays all configuration values with the secret redacted.
    """
    settings = _get_settings_safe()

    if settings is None:
        error_console.print("[red]Configuration is invalid.[/red]")
        error_console.print()
        error_console.print("Check FAUNA_* environment variables or your .env file.")
        raise typer.Exit(1)

    table = Table(title="Settings", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in settings.redacted_display().items():
        display_value = str(value) if value is not None else "[dim]not set[/dim]"
        table.add_row(key, display_value)

    console.print(table)
    console.print(f"[bold]Base URL:[/bold] {settings.base_url}")


@app.command()
def version() -> None:
    """Print the version number."""
    console.print(f"fauna-client version {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
