"""CLI helper utilities."""

import sys
from pathlib import Path

import typer
from rich_toolkit import RichToolkit, RichToolkitTheme
from rich_toolkit.styles import TaggedStyle

from openai_connector.config.settings import ConfigurationError, Settings
from openai_connector.connector import OpenAIConnector
from openai_connector.core.logging import get_logger, setup_logging
from openai_connector.exceptions import OpenAIConnectorError


logger = get_logger(__name__)


def get_rich_toolkit() -> RichToolkit:
    theme = RichToolkitTheme(
        style=TaggedStyle(tag_width=11),
        theme={
            "tag.title": "white on #10a37f",
            "tag": "white on #0d8a6a",
            "placeholder": "grey85",
            "text": "white",
            "selected": "#0d8a6a",
            "result": "grey85",
            "progress": "on #0d8a6a",
            "error": "bold red",
            "success": "bold green",
            "warning": "bold yellow",
            "info": "blue",
            "version": "cyan",
            "config": "cyan",
            "model": "magenta",
            "file": "yellow",
        },
    )

    return RichToolkit(theme=theme)


def get_config_path_from_context(ctx: typer.Context) -> Path | None:
    obj = ctx.find_root().obj or {}
    return obj.get("config_path")


def load_settings(ctx: typer.Context) -> Settings:
    """Load settings for the current invocation, exiting with 1 on failure.

    Logging is reconfigured from the settings unless --log-level was given.
    """
    try:
        settings = Settings.from_toml(get_config_path_from_context(ctx))
    except ConfigurationError as e:
        get_rich_toolkit().print(str(e), tag="error")
        raise typer.Exit(1) from e

    obj = ctx.find_root().obj or {}
    if obj.get("log_level") is None:
        log_format = settings.logging.format
        json_logs = obj.get("json_logs") or log_format == "json"
        if log_format == "auto" and not sys.stderr.isatty():
            json_logs = True
        setup_logging(json_logs=json_logs, log_level_name=settings.logging.level)

    logger.debug(
        "configuration_loaded",
        config_path=str(get_config_path_from_context(ctx) or ""),
        service_url=settings.service_url,
        connection_keys=sorted(settings.connection),
        log_level=settings.logging.level,
    )
    return settings


def create_connector(ctx: typer.Context) -> OpenAIConnector:
    """Build a connector from settings, exiting with 1 on configuration errors."""
    settings = load_settings(ctx)
    try:
        return OpenAIConnector(settings.to_connection_config(), settings.service_url)
    except OpenAIConnectorError as e:
        get_rich_toolkit().print(e.message, tag="error")
        raise typer.Exit(1) from e
