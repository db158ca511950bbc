"""Resolution of user connection config into the transport configuration."""

from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import BaseModel, ValidationError

from openai_connector.config.connection import (
    REQUIRED_FIELDS,
    ConnectionConfig,
    ResolvedHttpClientConfig,
)
from openai_connector.config.http import (
    CacheConfig,
    Http1Settings,
    Http2Settings,
    ProxyConfig,
    ResponseLimitConfig,
    SecureSocketConfig,
)
from openai_connector.exceptions import ConfigValidationError


logger = structlog.get_logger(__name__)


# Optional sub-configs in the order they are checked
OPTIONAL_SHAPES: dict[str, type[BaseModel]] = {
    "http1_settings": Http1Settings,
    "http2_settings": Http2Settings,
    "cache": CacheConfig,
    "response_limits": ResponseLimitConfig,
    "secure_socket": SecureSocketConfig,
    "proxy": ProxyConfig,
}


def _error_details(exc: ValidationError) -> dict[str, Any]:
    return {
        "errors": [
            {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in exc.errors()
        ]
    }


def load_connection_config(data: Mapping[str, Any]) -> ConnectionConfig:
    """Validate a loosely-typed mapping into a ConnectionConfig."""
    if not isinstance(data, Mapping):
        raise ConfigValidationError(
            "config",
            f"Connection configuration must be a mapping, got {type(data).__name__}",
        )
    try:
        return ConnectionConfig.model_validate(dict(data))
    except ValidationError as e:
        errors = e.errors()
        field = str(errors[0]["loc"][0]) if errors and errors[0]["loc"] else "config"
        raise ConfigValidationError(
            field,
            f"Invalid connection configuration for '{field}': {errors[0]['msg']}",
            details=_error_details(e),
        ) from e


def _narrow(field: str, shape: type[BaseModel], raw: Any) -> BaseModel:
    """Check ``raw`` against ``shape`` and return an independent copy."""
    try:
        value = shape.model_validate(raw)
    except ValidationError as e:
        raise ConfigValidationError(
            field,
            f"Invalid connection configuration for '{field}': expected {shape.__name__}",
            details=_error_details(e),
        ) from e
    return value.model_copy(deep=True)


class ConfigurationResolver:
    """Turns a ConnectionConfig into a ResolvedHttpClientConfig.

    Required fields are copied as they are. Optional sub-configs are copied
    only when present, after being validated against their expected model.
    Absent optional fields stay unset so the transport applies its defaults.
    """

    def resolve(
        self, config: ConnectionConfig | Mapping[str, Any]
    ) -> ResolvedHttpClientConfig:
        """Resolve ``config``.

        Raises:
            ConfigValidationError: a field does not match its expected shape.
                Resolution stops at the first failing field.
        """
        if not isinstance(config, ConnectionConfig):
            config = load_connection_config(config)

        values: dict[str, Any] = {name: getattr(config, name) for name in REQUIRED_FIELDS}

        applied: list[str] = []
        for name, shape in OPTIONAL_SHAPES.items():
            raw = getattr(config, name)
            if raw is None:
                continue
            values[name] = _narrow(name, shape, raw)
            applied.append(name)

        resolved = ResolvedHttpClientConfig(**values)
        logger.debug(
            "connection_config_resolved",
            http_version=resolved.http_version.value,
            timeout=resolved.timeout,
            optional_fields=applied,
        )
        return resolved


def resolve_config(
    config: ConnectionConfig | Mapping[str, Any],
) -> ResolvedHttpClientConfig:
    """Module-level shortcut for ``ConfigurationResolver().resolve``."""
    return ConfigurationResolver().resolve(config)
