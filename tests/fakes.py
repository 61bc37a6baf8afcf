"""Canned HTTP plumbing shared by the test modules."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx

Handler = Callable[[httpx.Request], httpx.Response]


def envelope(data: Any = None, error: Any = None) -> bytes:
    return json.dumps({"data": data, "error": error}).encode()


def json_response(data: Any = None, error: Any = None, status: int = 200) -> httpx.Response:
    return httpx.Response(
        status, content=envelope(data, error), headers={"content-type": "application/json"}
    )


def redirect(location: str, status: int = 302) -> httpx.Response:
    return httpx.Response(status, headers={"location": location})


class RecordingHandler:
    """Serve canned responses and remember every request sent."""

    def __init__(self, handler: Handler) -> None:
        self._handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def urls(self) -> list[str]:
        return [str(request.url) for request in self.requests]


class FakeClock:
    """Monotonic clock that replays scheduled readings, then holds the last one.

    ``advance()`` moves the held reading forward, e.g. while a body streams.
    """

    def __init__(self, *readings: float) -> None:
        self._readings = list(readings)
        self.now = 0.0

    def __call__(self) -> float:
        if self._readings:
            self.now = self._readings.pop(0)
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
