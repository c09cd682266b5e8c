"""
Shared long-lived httpx.AsyncClient for the portal REST API.
Initialized once per process (or page session) to avoid creating a new client per request.
"""
from __future__ import annotations

import logging
import time

import httpx

from eduportal.config import settings
from eduportal.core.auth import AuthTokens, TokenStore
from eduportal.core.endpoints import ENDPOINTS, api_url

logger = logging.getLogger(__name__)

_http_client: httpx.AsyncClient | None = None


class BearerTokenAuth(httpx.Auth):
    """
    Adds the stored access token; on 401/403 refreshes it once and replays the request.
    After max_refresh_attempts for the same METHOD:url within the reset window, or on a
    failed refresh, the stored tokens are cleared and the failing response is returned.
    """

    requires_response_body = True

    def __init__(self, store: TokenStore | None = None, refresh_url: str | None = None):
        self.store = store or TokenStore()
        self.refresh_url = refresh_url or api_url(ENDPOINTS["auth"]["refresh"])
        self._attempts: dict[str, tuple[int, float]] = {}

    def _register_attempt(self, key: str) -> bool:
        """Record a refresh attempt for key; False once the budget is spent."""
        now = time.monotonic()
        count, started = self._attempts.get(key, (0, now))
        if now - started > settings.refresh_retry_reset_seconds:
            count, started = 0, now
        if count >= settings.max_refresh_attempts:
            self._attempts.pop(key, None)
            return False
        self._attempts[key] = (count + 1, started)
        return True

    def auth_flow(self, request: httpx.Request):
        tokens = self.store.load()
        if tokens is not None and tokens.access:
            request.headers["Authorization"] = f"Bearer {tokens.access}"
        response = yield request

        if response.status_code not in (401, 403):
            return
        if tokens is None or not tokens.refresh:
            return
        key = f"{request.method}:{request.url}"
        if not self._register_attempt(key):
            logger.warning("Token refresh budget exhausted for %s; clearing stored tokens", key)
            self.store.clear()
            return

        refresh_response = yield httpx.Request("POST", self.refresh_url, json={"refresh": tokens.refresh})
        try:
            data = refresh_response.json() if refresh_response.status_code == 200 else None
        except ValueError:
            data = None
        if not isinstance(data, dict) or not data.get("access"):
            logger.warning("Token refresh failed with status %s; clearing stored tokens", refresh_response.status_code)
            self._attempts.pop(key, None)
            self.store.clear()
            return

        new_tokens = AuthTokens(
            access=data["access"],
            refresh=data.get("refresh") or tokens.refresh,
            user_id=tokens.user_id,
        )
        self.store.save(new_tokens)
        request.headers["Authorization"] = f"Bearer {new_tokens.access}"
        yield request


def get_http_client() -> httpx.AsyncClient:
    """Return the shared async HTTP client. Must be initialized via init_http_client() first."""
    if _http_client is None:
        raise RuntimeError("HTTP client not initialized; call init_http_client() first.")
    return _http_client


def init_http_client(
    timeout: float | None = None,
    store: TokenStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create and store the shared client."""
    global _http_client
    if _http_client is not None:
        return _http_client
    _http_client = httpx.AsyncClient(
        base_url=settings.api_root,
        timeout=timeout if timeout is not None else settings.request_timeout_seconds,
        headers={"Content-Type": "application/json"},
        auth=BearerTokenAuth(store),
        transport=transport,
    )
    return _http_client


async def close_http_client() -> None:
    """Close the shared client."""
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
