"""Shared fixtures: token store on tmp_path, signed test tokens, in-memory list gateways."""

import asyncio
import time

import httpx
import pytest
import pytest_asyncio
from jose import jwt

from eduportal.core.auth import AuthContext, TokenStore
from eduportal.schemas.pagination import ListResult
from eduportal.services.list_gateway import ListOutcome

TEST_SECRET = "test-secret-key"
API_BASE = "http://test/api/"


def make_token(claims: dict | None = None, expires_in: int = 3600) -> str:
    payload = {"user_id": 7, "exp": int(time.time()) + expires_in, "iat": int(time.time())}
    payload.update(claims or {})
    token = jwt.encode(payload, TEST_SECRET, algorithm="HS256")
    return token if isinstance(token, str) else token.decode("utf-8")


class RecordingGateway:
    """Answers every fetch immediately with `result` and records what was asked."""

    def __init__(self, result: ListResult | None = None, error=None):
        self.result = result or ListResult(items=[{"id": 1}], total_count=95, total_pages=10)
        self.error = error
        self.calls: list[dict] = []

    async def fetch_list(self, endpoint, params=None, *, cursor=None, page_size=None):
        self.calls.append({"endpoint": endpoint, "params": dict(params or {}), "cursor": cursor})
        if self.error is not None:
            return ListOutcome.failure(self.error)
        return ListOutcome(result=self.result)


class ControlledGateway:
    """Each fetch waits on a future the test resolves, so completion order is up to the test."""

    def __init__(self):
        self.calls: list[dict] = []
        self.futures: list[asyncio.Future] = []

    async def fetch_list(self, endpoint, params=None, *, cursor=None, page_size=None):
        fut = asyncio.get_running_loop().create_future()
        self.calls.append({"endpoint": endpoint, "params": dict(params or {}), "cursor": cursor})
        self.futures.append(fut)
        return await fut


@pytest.fixture
def token_store(tmp_path):
    return TokenStore(tmp_path / "auth_tokens.json")


@pytest.fixture
def auth_context():
    token = make_token()
    return AuthContext(user_id="7", access_token=token)


@pytest.fixture
def gateway():
    return RecordingGateway()


@pytest_asyncio.fixture
async def shared_client_reset():
    """Make sure the module-level HTTP client is closed before and after the test."""
    from eduportal.services.http_client import close_http_client

    await close_http_client()
    yield
    await close_http_client()


def json_transport(handler):
    """MockTransport whose handler returns (status, body) or an httpx.Response."""

    def _handle(request: httpx.Request) -> httpx.Response:
        out = handler(request)
        if isinstance(out, httpx.Response):
            return out
        status, body = out
        return httpx.Response(status, json=body)

    return httpx.MockTransport(_handle)


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def controlled_gateway():
    return ControlledGateway()


@pytest.fixture
def mock_transport():
    return json_transport


@pytest.fixture
def make_gateway():
    return RecordingGateway
