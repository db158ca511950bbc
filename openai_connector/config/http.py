"""HTTP client sub-configuration models.

Each model describes one concern of the underlying HTTP transport. They are
frozen and reject unknown keys, so a value that validates against one of them
is safe to hand to the transport as-is.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator


class HttpVersion(str, Enum):
    """HTTP protocol version used by the transport."""

    HTTP_1_1 = "1.1"
    HTTP_2_0 = "2.0"


class Forwarded(str, Enum):
    """Whether to emit the ``Forwarded`` request header."""

    ENABLE = "enable"
    TRANSITION = "transition"
    DISABLE = "disable"


class Compression(str, Enum):
    """Accept-Encoding behaviour."""

    AUTO = "AUTO"
    ALWAYS = "ALWAYS"
    NEVER = "NEVER"


class KeepAlive(str, Enum):
    AUTO = "AUTO"
    ALWAYS = "ALWAYS"
    NEVER = "NEVER"


class Chunking(str, Enum):
    AUTO = "AUTO"
    ALWAYS = "ALWAYS"
    NEVER = "NEVER"


class CachingPolicy(str, Enum):
    CACHE_CONTROL_AND_VALIDATORS = "CACHE_CONTROL_AND_VALIDATORS"
    RFC_7234 = "RFC_7234"


class _SubConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class BearerTokenConfig(_SubConfig):
    """Bearer token credentials sent as ``Authorization: Bearer <token>``."""

    token: SecretStr = Field(..., description="OpenAI API key")


class ProxyConfig(_SubConfig):
    """Forward proxy settings."""

    host: str = Field(..., min_length=1, description="Proxy host name")
    port: int = Field(default=80, ge=1, le=65535, description="Proxy port")
    user_name: str | None = Field(default=None, description="Proxy user name")
    password: SecretStr | None = Field(default=None, description="Proxy password")

    @property
    def url(self) -> str:
        """Proxy URL including credentials when configured."""
        scheme, _, host = self.host.rpartition("://")
        scheme = scheme or "http"
        if self.user_name:
            password = self.password.get_secret_value() if self.password else ""
            return f"{scheme}://{self.user_name}:{password}@{host}:{self.port}"
        return f"{scheme}://{host}:{self.port}"


class CertKey(_SubConfig):
    """Client certificate and private key for mutual TLS."""

    cert_file: str = Field(..., description="Path to the client certificate")
    key_file: str = Field(..., description="Path to the private key")
    key_password: SecretStr | None = Field(
        default=None, description="Password protecting the private key"
    )


class SecureSocketConfig(_SubConfig):
    """TLS settings."""

    enable: bool = Field(
        default=True, description="Verify the server certificate (False disables TLS checks)"
    )
    cert: str | None = Field(default=None, description="Path to a CA bundle")
    key: CertKey | None = Field(default=None, description="Client certificate")
    protocol_versions: tuple[str, ...] | None = Field(
        default=None, description="Allowed TLS versions, e.g. ('TLSv1.2', 'TLSv1.3')"
    )
    ciphers: tuple[str, ...] | None = Field(
        default=None, description="OpenSSL cipher names"
    )
    verify_hostname: bool = Field(default=True, description="Check the server host name")

    @model_validator(mode="after")
    def _check_protocols(self) -> "SecureSocketConfig":
        if self.protocol_versions is not None:
            unknown = set(self.protocol_versions) - {"TLSv1.2", "TLSv1.3"}
            if unknown:
                raise ValueError(f"Unsupported TLS versions: {sorted(unknown)}")
        return self


class Http1Settings(_SubConfig):
    """HTTP/1.1 specific settings."""

    keep_alive: KeepAlive = Field(default=KeepAlive.AUTO)
    chunking: Chunking = Field(default=Chunking.AUTO)
    proxy: ProxyConfig | None = Field(default=None)


class Http2Settings(_SubConfig):
    """HTTP/2 specific settings."""

    http2_prior_knowledge: bool = Field(
        default=False, description="Talk HTTP/2 without negotiating via ALPN"
    )


class CacheConfig(_SubConfig):
    """Response cache settings."""

    enabled: bool = Field(default=True)
    capacity: int = Field(default=16, gt=0, description="Maximum cached responses")
    eviction_factor: float = Field(
        default=0.2, gt=0, le=1, description="Share of entries evicted when full"
    )
    policy: CachingPolicy = Field(default=CachingPolicy.CACHE_CONTROL_AND_VALIDATORS)


class ResponseLimitConfig(_SubConfig):
    """Upper bounds on inbound response sizes."""

    max_status_line_length: int = Field(default=4096, gt=0)
    max_header_size: int = Field(default=8192, gt=0)
    max_entity_body_size: int = Field(default=-1, ge=-1, description="-1 means unlimited")


class PoolConfig(_SubConfig):
    """Connection pool settings."""

    max_active_connections: int = Field(default=-1, ge=-1, description="-1 means unlimited")
    max_idle_connections: int = Field(default=100, ge=0)
    wait_time: float = Field(default=30.0, gt=0, description="Pool acquire timeout in seconds")
    max_active_streams_per_connection: int = Field(default=100, gt=0)
    keepalive_expiry: float = Field(default=5.0, ge=0)


class RollingWindow(_SubConfig):
    request_volume_threshold: int = Field(default=10, ge=1)
    time_window: float = Field(default=60.0, gt=0)
    bucket_size: float = Field(default=10.0, gt=0)


class CircuitBreakerConfig(_SubConfig):
    """Circuit breaker policy applied around the transport."""

    rolling_window: RollingWindow = Field(default_factory=RollingWindow)
    failure_threshold: float = Field(default=0.0, ge=0, le=1)
    reset_time: float = Field(default=0.0, ge=0)
    status_codes: tuple[int, ...] = Field(default=())


class RetryConfig(_SubConfig):
    """Retry policy applied around the transport."""

    count: int = Field(default=0, ge=0)
    interval: float = Field(default=0.0, ge=0)
    backoff_factor: float = Field(default=0.0, ge=0)
    max_wait_interval: float = Field(default=0.0, ge=0, description="0 means unbounded")
    status_codes: tuple[int, ...] = Field(default=())

    @model_validator(mode="after")
    def _check_backoff(self) -> "RetryConfig":
        if 0 < self.backoff_factor < 1:
            raise ValueError("backoff_factor must be 0 (constant interval) or at least 1")
        return self
