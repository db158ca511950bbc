"""Tests for the rolling-window circuit breaker."""

import pytest

from openai_connector.config import CircuitBreakerConfig, RollingWindow
from openai_connector.core.circuit_breaker import CircuitBreaker, CircuitState


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def make_breaker(clock: FakeClock, **overrides: object) -> CircuitBreaker:
    values: dict[str, object] = {
        "rolling_window": RollingWindow(
            request_volume_threshold=4, time_window=60.0, bucket_size=10.0
        ),
        "failure_threshold": 0.5,
        "reset_time": 30.0,
    }
    values.update(overrides)
    return CircuitBreaker(CircuitBreakerConfig(**values), clock=clock)


@pytest.mark.unit
class TestCircuitBreaker:
    """Test state transitions of CircuitBreaker."""

    def test_starts_closed(self, clock: FakeClock) -> None:
        breaker = make_breaker(clock)
        assert breaker.state is CircuitState.CLOSED
        assert breaker.allow_request()

    def test_stays_closed_below_volume_threshold(self, clock: FakeClock) -> None:
        breaker = make_breaker(clock)
        for _ in range(3):
            breaker.record_failure()
        assert breaker.state is CircuitState.CLOSED

    def test_opens_when_ratio_reached(self, clock: FakeClock) -> None:
        breaker = make_breaker(clock)
        breaker.record_success()
        breaker.record_success()
        breaker.record_failure()
        assert breaker.state is CircuitState.CLOSED

        breaker.record_failure()

        assert breaker.state is CircuitState.OPEN
        assert not breaker.allow_request()

    def test_stays_closed_below_ratio(self, clock: FakeClock) -> None:
        breaker = make_breaker(clock)
        for _ in range(3):
            breaker.record_success()
        breaker.record_failure()
        assert breaker.state is CircuitState.CLOSED

    def test_zero_threshold_needs_a_failure(self, clock: FakeClock) -> None:
        breaker = make_breaker(clock, failure_threshold=0.0)
        for _ in range(10):
            breaker.record_success()
        assert breaker.state is CircuitState.CLOSED

    def test_old_buckets_leave_window(self, clock: FakeClock) -> None:
        breaker = make_breaker(clock)
        for _ in range(3):
            breaker.record_failure()

        clock.advance(61.0)
        breaker.record_failure()

        assert breaker.state is CircuitState.CLOSED

    def test_half_open_after_reset_time(self, clock: FakeClock) -> None:
        breaker = make_breaker(clock)
        for _ in range(4):
            breaker.record_failure()

        clock.advance(30.0)

        assert breaker.state is CircuitState.HALF_OPEN
        assert breaker.allow_request()
        assert not breaker.allow_request()

    def test_trial_success_closes(self, clock: FakeClock) -> None:
        breaker = make_breaker(clock)
        for _ in range(4):
            breaker.record_failure()
        clock.advance(30.0)
        assert breaker.allow_request()

        breaker.record_success()

        assert breaker.state is CircuitState.CLOSED
        # window was cleared, so a single failure does not reopen
        breaker.record_failure()
        assert breaker.state is CircuitState.CLOSED

    def test_trial_failure_reopens(self, clock: FakeClock) -> None:
        breaker = make_breaker(clock)
        for _ in range(4):
            breaker.record_failure()
        clock.advance(30.0)
        assert breaker.allow_request()

        breaker.record_failure()

        assert breaker.state is CircuitState.OPEN
        clock.advance(10.0)
        assert not breaker.allow_request()
