"""Configuration inspection commands."""

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from openai_connector.cli.helpers import get_rich_toolkit, load_settings
from openai_connector.config.connection import OPTIONAL_FIELDS, REQUIRED_FIELDS
from openai_connector.core.resolver import ConfigurationResolver
from openai_connector.exceptions import ConfigValidationError


app = typer.Typer(name="config", help="Inspect connector configuration.")

console = Console()


@app.command(name="show")
def show_config(ctx: typer.Context) -> None:
    """Show the resolved connection configuration."""
    toolkit = get_rich_toolkit()
    settings = load_settings(ctx)

    try:
        resolved = ConfigurationResolver().resolve(settings.to_connection_config())
    except ConfigValidationError as e:
        toolkit.print(f"{e.field}: {e.message}", tag="error")
        raise typer.Exit(1) from e

    table = Table(
        show_header=True,
        header_style="bold cyan",
        box=box.ROUNDED,
        title="Resolved Connection",
        title_style="bold white",
    )
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")
    table.add_column("Source", style="dim")

    table.add_row("service_url", settings.service_url, "settings")
    dumped = resolved.model_dump(mode="json")
    for name in REQUIRED_FIELDS:
        table.add_row(name, str(dumped[name]), "required")
    for name in OPTIONAL_FIELDS:
        if name in resolved.optional_fields_set:
            table.add_row(name, str(dumped[name]), "configured")
        else:
            table.add_row(name, "-", "transport default")

    console.print(table)
