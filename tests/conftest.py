"""Shared fixtures for kwatta tests."""

import json

import pytest
from kwatta import HttpResponse, Kwatta


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Async sleep replacement that advances a ManualClock instead of blocking."""

    def __init__(self, clock: ManualClock):
        self.clock = clock
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        self.clock.advance(seconds)


class FakeTransport:
    """Transport returning queued responses and recording every call."""

    def __init__(self, clock: ManualClock):
        self.clock = clock
        self.calls = []
        self.dispatch_times: list[float] = []
        self._queue = []

    def respond(self, status: int = 200, body=None, raw: bytes = None) -> None:
        content = raw if raw is not None else json.dumps(body).encode()
        self._queue.append(HttpResponse(status_code=status, content=content, content_type="application/json"))

    def fail(self, error: Exception) -> None:
        self._queue.append(error)

    async def __call__(self, url, options):
        self.calls.append((url, options))
        self.dispatch_times.append(self.clock())
        if not self._queue:
            return HttpResponse(status_code=200, content=b'{"ok": true}', content_type="application/json")
        item = self._queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def last_options(self):
        return self.calls[-1][1]


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def sleeper(clock):
    return RecordingSleep(clock)


@pytest.fixture
def transport(clock):
    return FakeTransport(clock)


@pytest.fixture
def client(transport, clock, sleeper):
    return Kwatta(
        "https://api.example.com",
        transport=transport,
        rate_limit_delay=1.0,
        cache_lifetime=60.0,
        clock=clock,
        sleep=sleeper,
    )
