"""Connector settings loaded from the environment, .env and TOML files."""

import os
import tomllib
from pathlib import Path
from typing import Any

import structlog
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from openai_connector.core.resolver import load_connection_config

from .connection import DEFAULT_SERVICE_URL, ConnectionConfig
from .logging import LoggingSettings


__all__ = ["ConfigurationError", "Settings", "find_toml_config_file"]

ENV_PREFIX = "OPENAI_CONNECTOR_"

logger = structlog.get_logger(__name__)


class ConfigurationError(Exception):
    """Raised when configuration loading fails."""

    pass


def get_config_dir() -> Path:
    """Return the XDG configuration directory for the connector."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / "openai-connector"


def find_toml_config_file() -> Path | None:
    """Find the TOML configuration file.

    Searches in the following order:
    1. The path in ``OPENAI_CONNECTOR_CONFIG_FILE``
    2. .openai-connector.toml in the current directory
    3. config.toml in XDG_CONFIG_HOME/openai-connector/
    """
    env_path = os.environ.get(f"{ENV_PREFIX}CONFIG_FILE")
    if env_path:
        return Path(env_path)

    current_dir_config = Path.cwd() / ".openai-connector.toml"
    if current_dir_config.exists():
        return current_dir_config

    xdg_config = get_config_dir() / "config.toml"
    if xdg_config.exists():
        return xdg_config

    return None


def _strip_env_overrides(data: dict[str, Any], env_key: str) -> dict[str, Any]:
    """Drop TOML values that an environment variable already provides."""
    kept: dict[str, Any] = {}
    for key, value in data.items():
        key_env = f"{env_key}{key.upper()}"
        if isinstance(value, dict):
            nested = _strip_env_overrides(value, f"{key_env}__")
            if nested and os.getenv(key_env) is None:
                kept[key] = nested
        elif os.getenv(key_env) is None:
            kept[key] = value
    return kept


class Settings(BaseSettings):
    """
    Connector settings.

    Loaded from environment variables prefixed with ``OPENAI_CONNECTOR_``, a
    ``.env`` file and, through ``from_toml``, a TOML file. Environment
    variables take precedence over TOML values.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    api_key: SecretStr = Field(
        default=SecretStr(""),
        description="OpenAI API key used as the bearer token",
    )

    service_url: str = Field(
        default=DEFAULT_SERVICE_URL,
        description="Base URL of the OpenAI API",
    )

    connection: dict[str, Any] = Field(
        default_factory=dict,
        description="Connection options (timeout, proxy, retry_config, ...) without auth",
    )

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    def to_connection_config(self) -> ConnectionConfig:
        """Build the connection config, raising ConfigValidationError on bad shapes."""
        data = dict(self.connection)
        data["auth"] = {"token": self.api_key.get_secret_value()}
        return load_connection_config(data)

    def model_dump_safe(self) -> dict[str, Any]:
        """Dump settings with secrets masked."""
        return self.model_dump(mode="json")

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file."""
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read TOML config file {toml_path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML syntax in {toml_path}: {e}") from e

    @classmethod
    def from_toml(cls, toml_path: Path | str | None = None, **kwargs: Any) -> "Settings":
        """Create Settings from a TOML file, environment and keyword overrides."""
        if isinstance(toml_path, str):
            toml_path = Path(toml_path)
        if toml_path is None:
            toml_path = find_toml_config_file()

        config_data: dict[str, Any] = {}
        if toml_path is not None:
            config_data = cls.load_toml_config(toml_path)
            logger.info("config_file_loaded", path=str(toml_path))

        values = _strip_env_overrides(config_data, ENV_PREFIX)
        values.update(kwargs)
        return cls(**values)

