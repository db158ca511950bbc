"""File management commands."""

from pathlib import Path

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from openai_connector.cli.helpers import create_connector, get_rich_toolkit
from openai_connector.exceptions import TransportError


app = typer.Typer(name="files", help="List and download uploaded files.")

console = Console()


@app.command(name="list")
def list_files(ctx: typer.Context) -> None:
    """List uploaded files."""
    toolkit = get_rich_toolkit()
    with create_connector(ctx) as connector:
        try:
            files = connector.list_files()
        except TransportError as e:
            toolkit.print(e.message, tag="error")
            raise typer.Exit(1) from e

    if not files.data:
        toolkit.print("No files found", tag="warning")
        return

    table = Table(show_header=True, header_style="bold cyan", box=box.ROUNDED)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Filename", style="white")
    table.add_column("Purpose", style="dim")
    table.add_column("Bytes", justify="right")
    for file in files.data:
        table.add_row(
            file.id,
            file.filename or "",
            file.purpose or "",
            str(file.bytes) if file.bytes is not None else "",
        )
    console.print(table)


@app.command(name="download")
def download_file(
    ctx: typer.Context,
    file_id: str = typer.Argument(..., help="File ID"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write contents to this path instead of stdout"
    ),
) -> None:
    """Download the contents of an uploaded file."""
    toolkit = get_rich_toolkit()
    with create_connector(ctx) as connector:
        try:
            content = connector.download_file(file_id)
        except TransportError as e:
            toolkit.print(e.message, tag="error")
            raise typer.Exit(1) from e

    if output is None:
        typer.echo(content, nl=False)
        return
    output.write_text(content, encoding="utf-8")
    toolkit.print(f"Saved {file_id} to {output}", tag="success")
