"""Shared fixtures: settings and an in-memory stand-in for the Toggl API."""

import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from toggl_mcp.bulk import NoPacing
from toggl_mcp.client import TogglClient
from toggl_mcp.config import TogglSettings
from toggl_mcp.tools import TogglTools

BASE_URL = "https://toggl.test/api/v9"
TOKEN = "test-token"


class FakeToggl:
    """
    Routes requests by (method, path below the base URL) to queued responses.

    Each route holds a list of responses consumed in order; the last one is
    reused once the queue runs dry. Every request is recorded.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[Tuple[int, Dict[str, Any]]]] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        json_body: Any = None,
        text: Optional[str] = None,
    ) -> None:
        if text is not None:
            kwargs = {"text": text}
        elif json_body is not None:
            kwargs = {"json": json_body}
        else:
            kwargs = {}
        self.routes.setdefault((method, path), []).append((status, kwargs))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path[len("/api/v9"):]
        queue = self.routes.get((request.method, path))
        if not queue:
            return httpx.Response(404, text=f"no route for {request.method} {path}")
        status, kwargs = queue.pop(0) if len(queue) > 1 else queue[0]
        return httpx.Response(status, **kwargs)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def settings():
    return TogglSettings(api_token=TOKEN, base_url=BASE_URL, bulk_interval=0)


@pytest.fixture
def fake_toggl():
    return FakeToggl()


@pytest.fixture
def client(settings, fake_toggl):
    return TogglClient(settings, transport=fake_toggl.transport)


@pytest.fixture
def tools(client):
    return TogglTools(client, NoPacing())
