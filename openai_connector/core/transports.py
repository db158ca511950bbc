"""httpx transports applying retry, circuit breaker, cache and size policies.

Each transport wraps another ``httpx.BaseTransport`` and is composed by
``HTTPClientFactory`` around the real ``httpx.HTTPTransport``.
"""

import math
import threading
import time
from collections import OrderedDict
from collections.abc import Callable, Iterator
from dataclasses import dataclass

import httpx
import structlog

from openai_connector.config.http import (
    CacheConfig,
    CachingPolicy,
    ResponseLimitConfig,
    RetryConfig,
)
from openai_connector.exceptions import CircuitOpenError, TransportError

from .circuit_breaker import CircuitBreaker


logger = structlog.get_logger(__name__)


class RetryTransport(httpx.BaseTransport):
    """Re-sends a request on transport errors or on listed status codes."""

    def __init__(
        self,
        transport: httpx.BaseTransport,
        config: RetryConfig,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._transport = transport
        self._config = config
        self._sleep = sleep

    def wait_interval(self, attempt: int) -> float:
        """Seconds to wait before retry number ``attempt`` (zero based)."""
        interval = self._config.interval
        if self._config.backoff_factor > 0:
            interval *= self._config.backoff_factor**attempt
        if self._config.max_wait_interval > 0:
            interval = min(interval, self._config.max_wait_interval)
        return interval

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        attempt = 0
        while True:
            try:
                response = self._transport.handle_request(request)
            except httpx.TransportError as e:
                if attempt >= self._config.count:
                    raise
                reason = type(e).__name__
            else:
                if (
                    response.status_code not in self._config.status_codes
                    or attempt >= self._config.count
                ):
                    return response
                response.close()
                reason = f"status_{response.status_code}"

            wait = self.wait_interval(attempt)
            logger.info(
                "retry_scheduled",
                method=request.method,
                url=str(request.url),
                attempt=attempt + 1,
                max_attempts=self._config.count,
                wait_seconds=wait,
                reason=reason,
            )
            if wait > 0:
                self._sleep(wait)
            attempt += 1

    def close(self) -> None:
        self._transport.close()


class CircuitBreakerTransport(httpx.BaseTransport):
    """Rejects requests with ``CircuitOpenError`` while the circuit is open."""

    def __init__(
        self,
        transport: httpx.BaseTransport,
        breaker: CircuitBreaker,
        failure_status_codes: tuple[int, ...] = (),
    ) -> None:
        self._transport = transport
        self.breaker = breaker
        self._failure_status_codes = failure_status_codes

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        if not self.breaker.allow_request():
            logger.warning(
                "circuit_request_rejected", method=request.method, url=str(request.url)
            )
            raise CircuitOpenError()
        try:
            response = self._transport.handle_request(request)
        except Exception:
            # Any failure inside the breaker counts, including response limit errors
            self.breaker.record_failure()
            raise
        if response.status_code in self._failure_status_codes:
            self.breaker.record_failure()
        else:
            self.breaker.record_success()
        return response

    def close(self) -> None:
        self._transport.close()


@dataclass
class _CacheEntry:
    status_code: int
    headers: list[tuple[bytes, bytes]]
    content: bytes
    expires_at: float
    etag: str | None


def _cache_directives(headers: httpx.Headers) -> dict[str, str | None]:
    directives: dict[str, str | None] = {}
    for item in headers.get("cache-control", "").split(","):
        key, _, value = item.strip().partition("=")
        if key:
            directives[key.lower()] = value.strip('"') or None
    return directives


class CachingTransport(httpx.BaseTransport):
    """In-memory cache for GET responses carrying ``Cache-Control: max-age``.

    ``no-store`` responses are never stored. With the
    ``CACHE_CONTROL_AND_VALIDATORS`` policy an expired entry that has an ETag
    is revalidated with ``If-None-Match`` and reused on ``304``.
    """

    def __init__(
        self,
        transport: httpx.BaseTransport,
        config: CacheConfig,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._transport = transport
        self._config = config
        self._clock = clock
        self._entries: OrderedDict[str, _CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        if request.method != "GET":
            return self._transport.handle_request(request)

        key = str(request.url)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self._entries.move_to_end(key)

        if entry is not None and entry.expires_at > self._clock():
            logger.debug("cache_hit", url=key)
            return self._replay(entry)

        revalidating = (
            entry is not None
            and entry.etag is not None
            and self._config.policy is CachingPolicy.CACHE_CONTROL_AND_VALIDATORS
        )
        if revalidating:
            request.headers["If-None-Match"] = entry.etag

        response = self._transport.handle_request(request)

        if revalidating and response.status_code == 304:
            response.close()
            max_age = self._max_age(response.headers)
            entry.expires_at = self._clock() + (max_age or 0)
            logger.debug("cache_revalidated", url=key)
            return self._replay(entry)

        if response.status_code != 200:
            return response
        max_age = self._max_age(response.headers)
        if max_age is None:
            return response

        # Entries hold the decoded body, so encoding and length headers are dropped
        content = response.read()
        response.close()
        entry = _CacheEntry(
            status_code=response.status_code,
            headers=[
                (k, v)
                for k, v in response.headers.raw
                if k.lower() not in (b"content-encoding", b"content-length")
            ],
            content=content,
            expires_at=self._clock() + max_age,
            etag=response.headers.get("etag"),
        )
        self._store(key, entry)
        return self._replay(entry)

    def _max_age(self, headers: httpx.Headers) -> int | None:
        directives = _cache_directives(headers)
        if "no-store" in directives:
            return None
        try:
            return int(directives["max-age"] or "")
        except (KeyError, ValueError):
            return None

    def _store(self, key: str, entry: _CacheEntry) -> None:
        with self._lock:
            if key not in self._entries and len(self._entries) >= self._config.capacity:
                evict = math.ceil(self._config.capacity * self._config.eviction_factor)
                for _ in range(min(evict, len(self._entries))):
                    self._entries.popitem(last=False)
                logger.debug("cache_evicted", count=evict)
            self._entries[key] = entry
            self._entries.move_to_end(key)

    @staticmethod
    def _replay(entry: _CacheEntry) -> httpx.Response:
        return httpx.Response(
            status_code=entry.status_code,
            headers=entry.headers,
            stream=httpx.ByteStream(entry.content),
        )

    def close(self) -> None:
        self._transport.close()


class _LimitedStream(httpx.SyncByteStream):
    def __init__(self, stream: httpx.SyncByteStream, limit: int) -> None:
        self._stream = stream
        self._limit = limit

    def __iter__(self) -> Iterator[bytes]:
        received = 0
        for chunk in self._stream:
            received += len(chunk)
            if received > self._limit:
                raise TransportError(
                    f"Response body exceeds the limit of {self._limit} bytes"
                )
            yield chunk

    def close(self) -> None:
        self._stream.close()


class ResponseLimitTransport(httpx.BaseTransport):
    """Rejects responses whose status line, headers or body exceed the limits."""

    def __init__(self, transport: httpx.BaseTransport, config: ResponseLimitConfig) -> None:
        self._transport = transport
        self._config = config

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        response = self._transport.handle_request(request)

        http_version = response.extensions.get("http_version", b"HTTP/1.1")
        reason = response.extensions.get("reason_phrase", b"")
        status_line_length = len(http_version) + len(reason) + 5
        if status_line_length > self._config.max_status_line_length:
            response.close()
            raise TransportError(
                f"Status line exceeds the limit of {self._config.max_status_line_length} bytes",
                status_code=response.status_code,
            )

        header_size = sum(len(k) + len(v) + 4 for k, v in response.headers.raw)
        if header_size > self._config.max_header_size:
            response.close()
            raise TransportError(
                f"Response headers exceed the limit of {self._config.max_header_size} bytes",
                status_code=response.status_code,
            )

        limit = self._config.max_entity_body_size
        if limit < 0:
            return response

        content_length = response.headers.get("content-length")
        if content_length is not None and content_length.isdigit() and int(content_length) > limit:
            response.close()
            raise TransportError(
                f"Response body exceeds the limit of {limit} bytes",
                status_code=response.status_code,
            )

        if isinstance(response.stream, httpx.SyncByteStream):
            response.stream = _LimitedStream(response.stream, limit)
        return response

    def close(self) -> None:
        self._transport.close()
