"""Shared fixtures for turnstile tests."""

from collections.abc import Callable, Iterator

import pytest

from turnstile.context import RequestContext
from turnstile.events import PipelineEvent, set_event_sink
from turnstile.http.request import HttpRequest


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def events() -> Iterator[list[PipelineEvent]]:
    """Capture process-wide pipeline events for the duration of a test."""
    captured: list[PipelineEvent] = []
    set_event_sink(captured.append)
    try:
        yield captured
    finally:
        set_event_sink(None)


@pytest.fixture
def make_context() -> Callable[..., RequestContext]:
    """Factory for the initial context of a request (defaults to GET /api/profile)."""

    def factory(
        path: str = "/api/profile",
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: str = "",
    ) -> RequestContext:
        return RequestContext.for_request(HttpRequest.build(path, method, headers, body))

    return factory
