"""Shared test fixtures for the openai_connector tests.

Only the network is mocked: connectors are built through the real resolver
and HTTP client factory, and ``pytest_httpx`` intercepts the innermost
``httpx.HTTPTransport``.
"""

from collections.abc import Generator
from typing import Any

import pytest

from openai_connector import OpenAIConnector
from openai_connector.config import ConnectionConfig
from openai_connector.core.logging import setup_logging


API_BASE = "https://api.openai.com/v1"
TEST_TOKEN = "sk-test-0123456789"

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"


def pytest_configure(config: pytest.Config) -> None:
    """Configure logging the way the CLI does, at DEBUG level."""
    setup_logging(json_logs=False, log_level_name="DEBUG")


@pytest.fixture(autouse=True)
def isolated_settings_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Any
) -> Generator[None, None, None]:
    """Keep host environment variables and config files out of the tests."""
    import os

    for key in list(os.environ):
        if key.startswith("OPENAI_CONNECTOR_") or key.upper() in {
            "HTTPS_PROXY",
            "HTTP_PROXY",
            "ALL_PROXY",
            "REQUESTS_CA_BUNDLE",
            "SSL_CERT_FILE",
            "SSL_VERIFY",
        }:
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def connection_config() -> ConnectionConfig:
    """Connection config with only the required auth section."""
    return ConnectionConfig.model_validate({"auth": {"token": TEST_TOKEN}})


@pytest.fixture
def connector(connection_config: ConnectionConfig) -> Generator[OpenAIConnector, None, None]:
    """Connector talking to the default service URL."""
    with OpenAIConnector(connection_config) as client:
        yield client


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES
