"""Rolling-window circuit breaker."""

import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import structlog

from openai_connector.config.http import CircuitBreakerConfig


logger = structlog.get_logger(__name__)


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class _Bucket:
    start: float
    total: int = 0
    failures: int = 0


class CircuitBreaker:
    """Tracks request outcomes and decides whether requests may be sent.

    Outcomes are counted in buckets of ``bucket_size`` seconds; buckets older
    than ``time_window`` are dropped. The circuit opens once the window holds
    at least ``request_volume_threshold`` requests and the failure ratio
    reaches ``failure_threshold``. After ``reset_time`` seconds one trial
    request is let through: success closes the circuit, failure reopens it.
    """

    def __init__(
        self,
        config: CircuitBreakerConfig,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._clock = clock
        self._buckets: deque[_Bucket] = deque()
        self._state = CircuitState.CLOSED
        self._opened_at = 0.0
        self._trial_in_flight = False
        self._lock = threading.Lock()

    @property
    def state(self) -> CircuitState:
        with self._lock:
            self._refresh_state()
            return self._state

    def allow_request(self) -> bool:
        with self._lock:
            self._refresh_state()
            if self._state is CircuitState.CLOSED:
                return True
            if self._state is CircuitState.HALF_OPEN and not self._trial_in_flight:
                self._trial_in_flight = True
                return True
            return False

    def record_success(self) -> None:
        with self._lock:
            if self._state is CircuitState.HALF_OPEN:
                self._close()
                return
            self._current_bucket().total += 1

    def record_failure(self) -> None:
        with self._lock:
            if self._state is CircuitState.HALF_OPEN:
                self._open()
                return
            bucket = self._current_bucket()
            bucket.total += 1
            bucket.failures += 1
            if self._should_trip():
                self._open()

    def _refresh_state(self) -> None:
        if (
            self._state is CircuitState.OPEN
            and self._clock() - self._opened_at >= self._config.reset_time
        ):
            self._state = CircuitState.HALF_OPEN
            self._trial_in_flight = False
            logger.info("circuit_half_open")

    def _current_bucket(self) -> _Bucket:
        now = self._clock()
        window = self._config.rolling_window
        while self._buckets and now - self._buckets[0].start >= window.time_window:
            self._buckets.popleft()
        if not self._buckets or now - self._buckets[-1].start >= window.bucket_size:
            self._buckets.append(_Bucket(start=now))
        return self._buckets[-1]

    def _should_trip(self) -> bool:
        total = sum(b.total for b in self._buckets)
        failures = sum(b.failures for b in self._buckets)
        if total < self._config.rolling_window.request_volume_threshold or not failures:
            return False
        return failures / total >= self._config.failure_threshold

    def _open(self) -> None:
        self._state = CircuitState.OPEN
        self._opened_at = self._clock()
        self._trial_in_flight = False
        logger.warning("circuit_opened", reset_time=self._config.reset_time)

    def _close(self) -> None:
        self._state = CircuitState.CLOSED
        self._buckets.clear()
        self._trial_in_flight = False
        logger.info("circuit_closed")
