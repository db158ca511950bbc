"""Connection configuration accepted by the connector."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .http import (
    BearerTokenConfig,
    CacheConfig,
    CircuitBreakerConfig,
    Compression,
    Forwarded,
    Http1Settings,
    Http2Settings,
    HttpVersion,
    PoolConfig,
    ProxyConfig,
    ResponseLimitConfig,
    RetryConfig,
    SecureSocketConfig,
)


DEFAULT_SERVICE_URL = "https://api.openai.com/v1"

REQUIRED_FIELDS: tuple[str, ...] = (
    "auth",
    "http_version",
    "timeout",
    "forwarded",
    "pool_config",
    "compression",
    "circuit_breaker",
    "retry_config",
    "validation",
)

OPTIONAL_FIELDS: tuple[str, ...] = (
    "http1_settings",
    "http2_settings",
    "cache",
    "response_limits",
    "secure_socket",
    "proxy",
)


class ConnectionConfig(BaseModel):
    """User supplied connection configuration.

    The optional sub-configs are held as given (mappings, models or anything
    else) and only narrowed to their precise shape by the resolver.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    auth: BearerTokenConfig
    http_version: HttpVersion = HttpVersion.HTTP_2_0
    timeout: float = Field(default=60.0, gt=0)
    forwarded: Forwarded = Forwarded.DISABLE
    pool_config: PoolConfig | None = None
    compression: Compression = Compression.AUTO
    circuit_breaker: CircuitBreakerConfig | None = None
    retry_config: RetryConfig | None = None
    validation: bool = True

    http1_settings: Any = None
    http2_settings: Any = None
    cache: Any = None
    response_limits: Any = None
    secure_socket: Any = None
    proxy: Any = None


class ResolvedHttpClientConfig(BaseModel):
    """Fully type-checked configuration handed to the HTTP transport."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    auth: BearerTokenConfig
    http_version: HttpVersion
    timeout: float
    forwarded: Forwarded
    pool_config: PoolConfig | None
    compression: Compression
    circuit_breaker: CircuitBreakerConfig | None
    retry_config: RetryConfig | None
    validation: bool

    http1_settings: Http1Settings | None = None
    http2_settings: Http2Settings | None = None
    cache: CacheConfig | None = None
    response_limits: ResponseLimitConfig | None = None
    secure_socket: SecureSocketConfig | None = None
    proxy: ProxyConfig | None = None

    @property
    def optional_fields_set(self) -> set[str]:
        return self.model_fields_set & set(OPTIONAL_FIELDS)
