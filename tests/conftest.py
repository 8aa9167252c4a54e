"""Shared pytest fixtures for hf_inference tests."""

import json
import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from hf_inference.services.inference_service import HuggingFaceService  # noqa: E402


class FakeHub:
    """Routes httpx requests to canned responses and records what was sent.

    Each URL maps to responses served in order, the last one repeated.
    A route item may also be an exception instance, which is raised, or a
    callable taking the request and returning the response.
    Unrouted URLs answer 404.
    """

    def __init__(self):
        self.routes: dict[str, object] = {}
        self.requests: list[httpx.Request] = []

    def add(self, url: str, *responses) -> None:
        self.routes[url] = list(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get(str(request.url))
        if not queue:
            return httpx.Response(404, json={"error": "Not Found"})

        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        if callable(item):
            return item(request)
        return item

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    def bodies(self, url: str | None = None) -> list:
        return [
            json.loads(request.content)
            for request in self.requests
            if request.content and (url is None or str(request.url) == url)
        ]

    def urls(self) -> list[str]:
        return [str(request.url) for request in self.requests]


@pytest.fixture
def hub() -> FakeHub:
    """Fake Hugging Face endpoints."""
    return FakeHub()


@pytest.fixture
def make_service(hub: FakeHub) -> Callable[..., HuggingFaceService]:
    """Build a HuggingFaceService wired to the fake hub with no retry delay."""
    services = []

    def _make(**kwargs) -> HuggingFaceService:
        kwargs.setdefault("api_token", "fake-api-token")
        kwargs.setdefault("retry_delay", 0)
        kwargs.setdefault("http_client", hub.client())
        service = HuggingFaceService(**kwargs)
        services.append(service)
        return service

    yield _make

    for service in services:
        service.close()


@pytest.fixture
def service(make_service) -> HuggingFaceService:
    """Service with the default model tables."""
    return make_service()
