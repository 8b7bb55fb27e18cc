"""
Shared fixtures for KGiTON SDK tests.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock

import httpx
import pytest

from kgiton.client import KGiTON
from kgiton.http_client import HttpClient

BASE_URL = "https://api.test.kgiton.local"

Handler = Callable[[httpx.Request], httpx.Response]


def reply(status_code: int = 200, body: Any = None) -> Handler:
    """Handler returning a fresh response on every call."""
    def _reply(request: httpx.Request) -> httpx.Response:
        if body is None:
            return httpx.Response(status_code, request=request)
        return httpx.Response(status_code, json=body, request=request)
    return _reply


def ok(data: Any = None, message: Optional[str] = None) -> Handler:
    body: Dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    return reply(200, body)


def fail(status_code: int, error: Optional[str] = None, message: Optional[str] = None) -> Handler:
    body: Dict[str, Any] = {"success": False}
    if error is not None:
        body["error"] = error
    if message is not None:
        body["message"] = message
    return reply(status_code, body)


def raise_transport(exc_cls: type = httpx.ConnectError, message: str = "Connection refused") -> Handler:
    def _raise(request: httpx.Request) -> httpx.Response:
        raise exc_cls(message, request=request)
    return _raise


class FakeApi:
    """In-memory KGiTON API for ``httpx.MockTransport``.

    Each route holds a queue of handlers; the last handler repeats once the
    queue is down to one entry.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], List[Handler]] = {}

    def add(self, method: str, path: str, *handlers: Handler) -> None:
        self.routes[(method.upper(), path)] = list(handlers)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and r.url.path == path]

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(
                404,
                json={"success": False, "error": f"No route for {request.method} {request.url.path}"},
                request=request
            )
        handler = queue.pop(0) if len(queue) > 1 else queue[0]
        return handler(request)


class FakeClock:
    """Monotonic clock advanced by the fake sleep."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_api():
    """Fake API router."""
    return FakeApi()


@pytest.fixture
def sleep():
    """Backoff sleep that returns immediately and records delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def make_client(fake_api, sleep):
    """Factory for gateways wired to the fake API."""
    def _make(**config: Any) -> HttpClient:
        config.setdefault("base_url", BASE_URL)
        return HttpClient(transport=httpx.MockTransport(fake_api), sleep=sleep, **config)
    return _make


@pytest.fixture
def http_client(make_client):
    """Gateway authenticated with an API key."""
    return make_client(api_key="kgiton_test_key")


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def kgiton(fake_api, fake_clock):
    """SDK instance wired to the fake API and fake clock."""
    return KGiTON(
        base_url=BASE_URL,
        api_key="kgiton_test_key",
        transport=httpx.MockTransport(fake_api),
        sleep=fake_clock.sleep,
        clock=fake_clock
    )
