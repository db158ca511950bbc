"""Entry point for the openai-connector CLI."""

from pathlib import Path

import typer

from openai_connector._version import __version__
from openai_connector.core.logging import setup_logging

from .commands import config_app, files_app, models_app
from .helpers import get_rich_toolkit


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        toolkit = get_rich_toolkit()
        toolkit.print(f"openai-connector {__version__}", tag="version")
        raise typer.Exit()


app = typer.Typer(
    rich_markup_mode="rich",
    add_completion=False,
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)


@app.callback()
def app_main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a TOML configuration file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Log level for connector diagnostics (overrides the config file)",
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON"),
) -> None:
    """Command line access to the OpenAI REST API."""
    setup_logging(json_logs=json_logs, log_level_name=log_level or "WARNING")
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["log_level"] = log_level
    ctx.obj["json_logs"] = json_logs


app.add_typer(config_app)
app.add_typer(models_app)
app.add_typer(files_app)


def main() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    main()
