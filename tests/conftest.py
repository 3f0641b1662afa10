"""Test configuration and fixtures."""

import json
from typing import Any, List

import httpx
import pytest

from codel_sms.client import Client
from codel_sms.core.config import Settings
from codel_sms.providers.base import CodelTransport


TOKEN = "a-valid-api-token-key"

FAKE_BULK_SUCCESS = [{"status": {"error_status": "success"}}]
FAKE_BULK_ERROR = [{"status": {"error_status": "failed"}}]


class FakeGateway:
    """Records requests and answers them from a queue of canned replies."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.replies: List[httpx.Response] = []

    def reply(self, payload: Any, status_code: int = 200):
        self.replies.append(httpx.Response(status_code, json=payload))

    def fail_with(self, error: Exception):
        self.replies.append(error)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.replies.pop(0) if self.replies else httpx.Response(200, json={"status": "success"})
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)

    @property
    def last_path(self) -> str:
        return self.requests[-1].url.path


@pytest.fixture
def test_settings() -> Settings:
    """Settings independent of the environment and any .env file."""
    return Settings(
        _env_file=None,
        api_token=None,
        default_sender_id=None,
        base_url="https://gateway.test/",
    )


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def transport(gateway, test_settings) -> CodelTransport:
    http_client = httpx.Client(transport=httpx.MockTransport(gateway.handler))
    transport = CodelTransport(TOKEN, test_settings, client=http_client)
    yield transport
    transport.close()


@pytest.fixture
def client(transport, test_settings) -> Client:
    """Client wired to the fake gateway."""
    return Client(TOKEN, transport=transport, settings=test_settings)


@pytest.fixture
def phone_numbers():
    return ["263771000001", "263772000002"]
