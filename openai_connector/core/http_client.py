"""HTTP client construction from a resolved connection configuration.

``HTTPClientFactory`` is the only place where configuration is mapped onto
``httpx``: protocol versions, timeouts, pool limits, TLS, proxying,
compression and the policy transports from ``transports``.
"""

import os
import ssl
from pathlib import Path
from typing import Any

import certifi
import httpx
import structlog

from openai_connector._version import __version__
from openai_connector.config.connection import DEFAULT_SERVICE_URL, ResolvedHttpClientConfig
from openai_connector.config.http import (
    Chunking,
    Compression,
    Forwarded,
    HttpVersion,
    KeepAlive,
    PoolConfig,
    SecureSocketConfig,
)
from openai_connector.exceptions import ConfigValidationError

from .circuit_breaker import CircuitBreaker
from .transports import (
    CachingTransport,
    CircuitBreakerTransport,
    ResponseLimitTransport,
    RetryTransport,
)


logger = structlog.get_logger(__name__)

USER_AGENT = f"openai-connector/{__version__}"

_TLS_VERSIONS = {
    "TLSv1.2": ssl.TLSVersion.TLSv1_2,
    "TLSv1.3": ssl.TLSVersion.TLSv1_3,
}


class HTTPClientFactory:
    """Factory for the HTTP client used by a connector.

    The resulting client carries:
    - bearer authentication and user agent headers
    - timeout and connection pool limits
    - HTTP/1.1 or HTTP/2 (requires httpx[http2])
    - TLS and proxy settings
    - retry, circuit breaker, cache and response limit transports when configured
    """

    @staticmethod
    def create_client(
        resolved: ResolvedHttpClientConfig,
        *,
        base_url: str = DEFAULT_SERVICE_URL,
        transport: httpx.BaseTransport | None = None,
        **kwargs: Any,
    ) -> httpx.Client:
        """Create a configured ``httpx.Client``.

        Args:
            resolved: Resolved connection configuration
            base_url: Service URL every request path is joined to
            transport: Innermost transport; defaults to ``httpx.HTTPTransport``
                built from the configuration
            **kwargs: Additional httpx.Client arguments

        Returns:
            Configured httpx.Client instance

        Raises:
            ConfigValidationError: TLS material could not be loaded
        """
        pool = resolved.pool_config
        http1 = resolved.http1_settings

        timeout = httpx.Timeout(
            resolved.timeout,
            pool=pool.wait_time if pool else resolved.timeout,
        )

        # Connection headers are illegal in HTTP/2, so keep-alive only applies to 1.1
        keepalive_disabled = (
            resolved.http_version is HttpVersion.HTTP_1_1
            and http1 is not None
            and http1.keep_alive is KeepAlive.NEVER
        )
        if pool:
            limits = httpx.Limits(
                max_connections=None
                if pool.max_active_connections < 0
                else pool.max_active_connections,
                max_keepalive_connections=0 if keepalive_disabled else pool.max_idle_connections,
                keepalive_expiry=pool.keepalive_expiry,
            )
        else:
            limits = httpx.Limits(
                max_connections=100,
                max_keepalive_connections=0 if keepalive_disabled else 20,
            )

        http2 = resolved.http_version is HttpVersion.HTTP_2_0
        prior_knowledge = bool(
            http2 and resolved.http2_settings and resolved.http2_settings.http2_prior_knowledge
        )

        proxy = _get_proxy_url(resolved)
        verify = (
            _build_ssl_context(resolved.secure_socket)
            if resolved.secure_socket
            else _get_ssl_context()
        )

        if transport is None:
            transport = httpx.HTTPTransport(
                verify=verify,
                http1=not prior_knowledge,
                http2=http2,
                limits=limits,
                proxy=proxy,
            )
        transport = _wrap_transport(transport, resolved)

        headers = {
            "Authorization": f"Bearer {resolved.auth.token.get_secret_value()}",
            "User-Agent": USER_AGENT,
        }
        if resolved.compression is Compression.NEVER:
            # "identity" means no compression
            headers["Accept-Encoding"] = "identity"
        elif resolved.compression is Compression.ALWAYS:
            headers["Accept-Encoding"] = "gzip, deflate"
        if keepalive_disabled:
            headers["Connection"] = "close"
        if "headers" in kwargs:
            headers.update(kwargs.pop("headers"))

        event_hooks: dict[str, list[Any]] = {"request": [], "response": []}
        if resolved.forwarded is not Forwarded.DISABLE:
            event_hooks["request"].append(_add_forwarded_header)

        ignored = _unsupported_settings(resolved)
        if ignored:
            logger.warning("http_client_settings_ignored", settings=ignored)

        logger.info(
            "http_client_created",
            base_url=base_url,
            http_version=resolved.http_version.value,
            timeout=resolved.timeout,
            max_connections=limits.max_connections,
            max_keepalive_connections=limits.max_keepalive_connections,
            has_proxy=proxy is not None,
            compression=resolved.compression.value,
            retry=resolved.retry_config is not None,
            circuit_breaker=resolved.circuit_breaker is not None,
            cache=resolved.cache is not None,
        )

        return httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
            event_hooks=event_hooks,
            trust_env=False,
            **kwargs,
        )


def _unsupported_settings(resolved: ResolvedHttpClientConfig) -> list[str]:
    """Names of configured values httpx cannot honour.

    Request bodies always carry a Content-Length when their size is known, so
    only chunking ALWAYS is unsupported. The HTTP/2 stream limit is negotiated
    by the server. Keep-alive NEVER is ignored under HTTP/2.
    """
    ignored: list[str] = []
    http1 = resolved.http1_settings
    if http1 is not None:
        if http1.chunking is Chunking.ALWAYS:
            ignored.append("http1_settings.chunking")
        if (
            http1.keep_alive is KeepAlive.NEVER
            and resolved.http_version is not HttpVersion.HTTP_1_1
        ):
            ignored.append("http1_settings.keep_alive")
    pool = resolved.pool_config
    if (
        pool is not None
        and pool.max_active_streams_per_connection
        != PoolConfig.model_fields["max_active_streams_per_connection"].default
    ):
        ignored.append("pool_config.max_active_streams_per_connection")
    return ignored


def _wrap_transport(
    transport: httpx.BaseTransport, resolved: ResolvedHttpClientConfig
) -> httpx.BaseTransport:
    """Layer the policy transports, innermost first."""
    if resolved.response_limits is not None:
        transport = ResponseLimitTransport(transport, resolved.response_limits)
    if resolved.cache is not None and resolved.cache.enabled:
        transport = CachingTransport(transport, resolved.cache)
    if resolved.retry_config is not None and resolved.retry_config.count > 0:
        transport = RetryTransport(transport, resolved.retry_config)
    if resolved.circuit_breaker is not None:
        transport = CircuitBreakerTransport(
            transport,
            CircuitBreaker(resolved.circuit_breaker),
            failure_status_codes=resolved.circuit_breaker.status_codes,
        )
    return transport


def _add_forwarded_header(request: httpx.Request) -> None:
    request.headers["Forwarded"] = (
        f"host={request.url.host};proto={request.url.scheme}"
    )


def _build_ssl_context(config: SecureSocketConfig) -> ssl.SSLContext | bool:
    """Build the SSL context for ``secure_socket``; False disables verification."""
    if not config.enable:
        logger.warning("ssl_verification_disabled", security_warning=True)
        return False

    try:
        context = ssl.create_default_context(cafile=config.cert or certifi.where())
        context.check_hostname = config.verify_hostname
        if config.key is not None:
            context.load_cert_chain(
                certfile=config.key.cert_file,
                keyfile=config.key.key_file,
                password=config.key.key_password.get_secret_value()
                if config.key.key_password
                else None,
            )
        if config.protocol_versions:
            versions = sorted(_TLS_VERSIONS[v] for v in config.protocol_versions)
            context.minimum_version = versions[0]
            context.maximum_version = versions[-1]
        if config.ciphers:
            context.set_ciphers(":".join(config.ciphers))
    except (OSError, ssl.SSLError) as e:
        raise ConfigValidationError(
            "secure_socket", f"Cannot load TLS configuration: {e}"
        ) from e
    return context


def _get_proxy_url(resolved: ResolvedHttpClientConfig) -> str | None:
    """Get the proxy URL from the configuration or the environment.

    Returns:
        str or None: Proxy URL if any proxy is set
    """
    if resolved.proxy is not None:
        return resolved.proxy.url
    if resolved.http1_settings is not None and resolved.http1_settings.proxy is not None:
        return resolved.http1_settings.proxy.url

    # For HTTPS requests, prioritize HTTPS_PROXY
    https_proxy = os.environ.get("HTTPS_PROXY") or os.environ.get("https_proxy")
    all_proxy = os.environ.get("ALL_PROXY")
    http_proxy = os.environ.get("HTTP_PROXY") or os.environ.get("http_proxy")

    proxy_url = https_proxy or all_proxy or http_proxy
    if proxy_url:
        logger.debug("proxy_configured_from_env", operation="get_proxy_url")
    return proxy_url


def _get_ssl_context() -> ssl.SSLContext | bool:
    """Get SSL verification from environment variables.

    Returns:
        - SSL context built from the CA bundle in REQUESTS_CA_BUNDLE/SSL_CERT_FILE
        - True for default verification
        - False to disable verification (insecure)
    """
    ca_bundle = os.environ.get("REQUESTS_CA_BUNDLE") or os.environ.get("SSL_CERT_FILE")
    ssl_verify = os.environ.get("SSL_VERIFY", "true").lower()

    if ca_bundle and Path(ca_bundle).exists():
        logger.info("ssl_ca_bundle_configured", ca_bundle_path=ca_bundle)
        return ssl.create_default_context(cafile=ca_bundle)
    elif ssl_verify in ("false", "0", "no"):
        logger.warning(
            "ssl_verification_disabled",
            ssl_verify_value=ssl_verify,
            security_warning=True,
        )
        return False
    return True
