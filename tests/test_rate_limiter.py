"""Tests for RequestThrottle."""

import pytest
from kwatta import RequestThrottle


class TestRequestThrottle:
    """Tests for RequestThrottle."""

    @pytest.fixture
    def throttle(self, clock, sleeper):
        return RequestThrottle(delay=2.0, clock=clock, sleep=sleeper)

    def test_no_prior_request(self, throttle):
        """Test that nothing is pending before the first request."""
        assert throttle.last_request is None
        assert throttle.remaining() == 0.0

    def test_remaining_after_mark(self, throttle, clock):
        """Test the remaining window after a request."""
        throttle.mark()
        clock.advance(0.5)
        assert throttle.remaining() == pytest.approx(1.5)

    def test_remaining_never_negative(self, throttle, clock):
        """Test that an elapsed window reports zero."""
        throttle.mark()
        clock.advance(10)
        assert throttle.remaining() == 0.0

    @pytest.mark.asyncio
    async def test_wait_sleeps_remaining(self, throttle, sleeper, clock):
        """Test that wait() sleeps the difference."""
        throttle.mark()
        clock.advance(0.5)

        waited = await throttle.wait()

        assert waited == pytest.approx(1.5)
        assert sleeper.calls == [pytest.approx(1.5)]

    @pytest.mark.asyncio
    async def test_wait_without_prior_request(self, throttle, sleeper):
        """Test that wait() returns immediately on a fresh throttle."""
        assert await throttle.wait() == 0.0
        assert sleeper.calls == []

    @pytest.mark.asyncio
    async def test_wait_does_not_mark(self, throttle, clock):
        """Test that only mark() updates the timestamp."""
        throttle.mark()
        await throttle.wait()
        assert throttle.last_request == 1000.0

    def test_zero_delay(self, clock, sleeper):
        """Test that a zero delay never waits."""
        throttle = RequestThrottle(delay=0, clock=clock, sleep=sleeper)
        throttle.mark()
        assert throttle.remaining() == 0.0

    def test_get_stats(self, throttle):
        """Test statistics."""
        throttle.mark()
        assert throttle.get_stats() == {"delay": 2.0, "last_request": 1000.0}
