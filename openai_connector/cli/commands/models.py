"""Model listing commands."""

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from openai_connector.cli.helpers import create_connector, get_rich_toolkit
from openai_connector.exceptions import TransportError


app = typer.Typer(name="models", help="List and inspect models.")

console = Console()


@app.command(name="list")
def list_models(ctx: typer.Context) -> None:
    """List the models available to the API key."""
    toolkit = get_rich_toolkit()
    with create_connector(ctx) as connector:
        try:
            models = connector.list_models()
        except TransportError as e:
            toolkit.print(e.message, tag="error")
            raise typer.Exit(1) from e

    if not models.data:
        toolkit.print("No models found", tag="warning")
        return

    table = Table(show_header=True, header_style="bold cyan", box=box.ROUNDED)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Owned by", style="white")
    for model in sorted(models.data, key=lambda m: m.id):
        table.add_row(model.id, model.owned_by or "")
    console.print(table)


@app.command(name="get")
def get_model(
    ctx: typer.Context,
    model: str = typer.Argument(..., help="Model ID"),
) -> None:
    """Show one model as JSON."""
    toolkit = get_rich_toolkit()
    with create_connector(ctx) as connector:
        try:
            info = connector.retrieve_model(model)
        except TransportError as e:
            toolkit.print(e.message, tag="error")
            raise typer.Exit(1) from e
    console.print_json(info.model_dump_json())
