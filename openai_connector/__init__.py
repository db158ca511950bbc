"""Typed client for the OpenAI REST API."""

from ._version import __version__
from .config import ConnectionConfig, ResolvedHttpClientConfig, Settings
from .connector import OpenAIConnector
from .core.multipart import FieldPart, FilePart, MultipartRequestBuilder, build_parts
from .core.resolver import ConfigurationResolver, resolve_config
from .exceptions import (
    BodyEncodingError,
    CircuitOpenError,
    ConfigValidationError,
    OpenAIConnectorError,
    TransportError,
)
from .models import FileContent


__all__ = [
    "BodyEncodingError",
    "CircuitOpenError",
    "ConfigValidationError",
    "ConfigurationResolver",
    "ConnectionConfig",
    "FieldPart",
    "FileContent",
    "FilePart",
    "MultipartRequestBuilder",
    "OpenAIConnector",
    "OpenAIConnectorError",
    "ResolvedHttpClientConfig",
    "Settings",
    "TransportError",
    "__version__",
    "build_parts",
    "resolve_config",
]
