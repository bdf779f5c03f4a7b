"""
VisitorBook Frontend: Test Configuration (conftest.py)
=======================================================

What:  Shared fixtures for the client-side test suite.
How:   An in-memory FakeBackend answers the four endpoints through
       httpx.MockTransport, so the real ApiClient, hooks and components run
       without a server. Tests can make an endpoint fail or refuse the
       connection and inspect the requests that were sent.

Fixtures:
    ├── fake_backend: the FakeBackend instance
    ├── api_client:   ApiClient wired to fake_backend
    └── cache:        empty QueryCache
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Tuple

import httpx
import pytest
import pytest_asyncio

from visitorbook.api.client import ApiClient
from visitorbook.sync import QueryCache

GENERIC_500 = {
    "error": "server_error",
    "message": "An internal error occurred. Please try again later.",
    "request_id": "test",
}


class FakeBackend:
    """Minimal stand-in for the VisitorBook API."""

    def __init__(self):
        self.count = 0
        self.messages: List[dict] = []
        self.requests: List[Tuple[str, str]] = []
        self.failures: Dict[Tuple[str, str], int] = {}
        self.unreachable = False
        self._clock = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    def fail(self, method: str, path: str, status: int = 500) -> None:
        self.failures[(method, path)] = status

    def add_message(self, name: str, content: str) -> dict:
        self._clock += timedelta(seconds=1)
        message = {
            "id": len(self.messages) + 1,
            "name": name,
            "content": content,
            "timestamp": self._clock.isoformat().replace("+00:00", "Z"),
        }
        self.messages.append(message)
        return message

    def handle(self, request: httpx.Request) -> httpx.Response:
        route = (request.method, request.url.path)
        self.requests.append(route)

        if self.unreachable:
            raise httpx.ConnectError("Connection refused", request=request)
        if route in self.failures:
            return httpx.Response(self.failures[route], json=GENERIC_500)

        if route == ("GET", "/api/visitors"):
            return httpx.Response(200, json={"count": self.count})
        if route == ("POST", "/api/visitors"):
            self.count += 1
            return httpx.Response(200, json={"count": self.count})
        if route == ("GET", "/api/messages"):
            return httpx.Response(200, json=list(reversed(self.messages))[:100])
        if route == ("POST", "/api/messages"):
            body = json.loads(request.content or b"{}")
            if not body.get("name") or not body.get("content"):
                return httpx.Response(400, json={
                    "error": "validation_error",
                    "message": "Name and content are required",
                })
            return httpx.Response(201, json=self.add_message(body["name"], body["content"]))
        return httpx.Response(404, json={"error": "not_found", "message": "Not Found"})


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest_asyncio.fixture
async def api_client(fake_backend):
    client = ApiClient("http://visitorbook.test", transport=httpx.MockTransport(fake_backend.handle))
    yield client
    await client.aclose()


@pytest.fixture
def cache():
    return QueryCache()
