"""Configuration models and settings for the OpenAI connector."""

from .connection import (
    DEFAULT_SERVICE_URL,
    OPTIONAL_FIELDS,
    REQUIRED_FIELDS,
    ConnectionConfig,
    ResolvedHttpClientConfig,
)
from .http import (
    BearerTokenConfig,
    CacheConfig,
    CertKey,
    Chunking,
    CircuitBreakerConfig,
    Compression,
    Forwarded,
    Http1Settings,
    Http2Settings,
    HttpVersion,
    KeepAlive,
    PoolConfig,
    ProxyConfig,
    ResponseLimitConfig,
    RetryConfig,
    RollingWindow,
    SecureSocketConfig,
)
from .logging import LoggingSettings
from .settings import ConfigurationError, Settings, find_toml_config_file


__all__ = [
    "DEFAULT_SERVICE_URL",
    "OPTIONAL_FIELDS",
    "REQUIRED_FIELDS",
    "BearerTokenConfig",
    "CacheConfig",
    "CertKey",
    "Chunking",
    "CircuitBreakerConfig",
    "Compression",
    "ConfigurationError",
    "ConnectionConfig",
    "Forwarded",
    "Http1Settings",
    "Http2Settings",
    "HttpVersion",
    "KeepAlive",
    "LoggingSettings",
    "PoolConfig",
    "ProxyConfig",
    "ResolvedHttpClientConfig",
    "ResponseLimitConfig",
    "RetryConfig",
    "RollingWindow",
    "SecureSocketConfig",
    "Settings",
    "find_toml_config_file",
]
