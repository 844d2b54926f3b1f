"""Shared fixtures: a test config and an httpx transport that records requests."""

import json

import httpx
import pytest

from axitrace.config import Config

TEST_KEY = "sk_test_abc123"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that answers with a canned response and keeps every request."""

    def __init__(self, status_code: int = 200, body: dict | None = None):
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.body = body if body is not None else {"success": True, "eventId": "evt_1"}
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def config():
    return Config(TEST_KEY, base_url="https://api.test")


@pytest.fixture
def make_transport():
    """Factory for transports with a given canned answer."""
    return RecordingTransport


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def http_client(transport):
    client = httpx.Client(base_url="https://api.test", transport=transport)
    yield client
    client.close()
