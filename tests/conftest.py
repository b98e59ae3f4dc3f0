"""Shared fixtures: temporary storage and a fake backend behind httpx.MockTransport."""

import json

import httpx
import pytest

from learnpath.api import ApiClient
from learnpath.storage import LocalStorage

API_URL = "http://testserver/api"


class FakeBackend:
    """
    Route table served through httpx.MockTransport.

    Routes are keyed by (method, path) with paths given relative to the API
    root. A route body may be an exception instance, which is raised as a
    transport failure.
    """

    def __init__(self):
        self.routes = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, status: int = 200, body=None):
        self.routes[(method.upper(), "/api" + path)] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": f"No route for {request.method} {request.url.path}"})
        status, body = route
        if isinstance(body, Exception):
            raise body
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def last_json(self):
        return json.loads(self.requests[-1].content)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method.upper() and r.url.path == "/api" + path
        ]


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "storage.db")


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def api(backend, storage):
    return ApiClient(API_URL, storage, transport=backend.transport)
