"""
Remote list gateway: one GET per list fetch, envelope normalization, failures as values;
admin form writes (create/update/delete) raise the typed errors instead.
The server answers either with a bare array or a DRF-style envelope
{results, count, total_pages, next, previous} (library also nests links.next/links.previous).
"""
from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx
from pydantic import BaseModel, ConfigDict

from eduportal.config import settings
from eduportal.core.endpoints import build_endpoint
from eduportal.core.errors import PortalError, TransportError, error_from_response
from eduportal.schemas.pagination import ListResult, total_pages_for
from eduportal.services.http_client import get_http_client

logger = logging.getLogger(__name__)


class ListOutcome(BaseModel):
    """Gateway answer: a result, plus the error when the fetch failed (result is then empty)."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    result: ListResult
    error: PortalError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: PortalError) -> "ListOutcome":
        return cls(result=ListResult.empty(), error=error)


def _int_or_none(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    return None


def normalize_envelope(data: Any, page_size: int | None = None) -> ListResult:
    """Bare array or paginated envelope -> ListResult. Raises ValueError for any other shape."""
    if isinstance(data, list):
        return ListResult(
            items=data,
            total_count=len(data),
            total_pages=total_pages_for(len(data), page_size) if page_size else 1,
        )
    if isinstance(data, dict) and isinstance(data.get("results"), list):
        results = data["results"]
        count = _int_or_none(data.get("count"))
        if count is None or count < 0:
            count = len(results)
        total_pages = _int_or_none(data.get("total_pages"))
        if total_pages is None or total_pages < 1:
            total_pages = total_pages_for(count, page_size or len(results) or 1)
        links = data.get("links") if isinstance(data.get("links"), dict) else {}
        return ListResult(
            items=results,
            total_count=count,
            total_pages=total_pages,
            next_cursor=data.get("next") or links.get("next") or None,
            prev_cursor=data.get("previous") or links.get("previous") or None,
        )
    raise ValueError(f"Unexpected list response shape: {type(data).__name__}")


def _log_response_error(method: str, url: str, response: httpx.Response) -> None:
    """Log HTTP error without sensitive data."""
    body = (response.text or "")[:500]
    logger.warning("API %s %s -> %s body=%s", method, url, response.status_code, body)


class RemoteListGateway:
    """Thin wrapper over the shared client; never raises from fetch_list."""

    def __init__(self, client: httpx.AsyncClient | None = None):
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client if self._client is not None else get_http_client()

    async def fetch_list(
        self,
        endpoint: str,
        params: Mapping[str, Any] | None = None,
        *,
        cursor: str | None = None,
        page_size: int | None = None,
    ) -> ListOutcome:
        """
        GET endpoint with params, or GET cursor verbatim (params ignored) when the server
        handed out a ready-made next/previous URL.
        """
        url = cursor or endpoint
        request_params = None if cursor else dict(params or {})
        try:
            r = await self.client.get(url, params=request_params)
        except httpx.HTTPError as e:
            logger.warning("API GET %s failed: %s", url, e)
            return ListOutcome.failure(TransportError("Network error. Please try again later."))
        if r.status_code >= 400:
            _log_response_error("GET", url, r)
            return ListOutcome.failure(error_from_response(r, "Failed to load list"))
        try:
            data = r.json() if r.content else []
            result = normalize_envelope(data, page_size=page_size)
        except ValueError as e:
            logger.warning("API GET %s returned an unusable body: %s", url, e)
            return ListOutcome.failure(TransportError("Unexpected response from server", status_code=r.status_code))
        return ListOutcome(result=result)

    async def fetch_detail(self, template: str, **path_params: Any) -> dict[str, Any]:
        """GET one resource. Raises NotFoundError / AuthenticationError / TransportError."""
        url = build_endpoint(template, **path_params)
        try:
            r = await self.client.get(url)
        except httpx.HTTPError as e:
            logger.warning("API GET %s failed: %s", url, e)
            raise TransportError("Network error. Please try again later.") from e
        if r.status_code >= 400:
            _log_response_error("GET", url, r)
            raise error_from_response(r, "Failed to load resource")
        return r.json() if r.content else {}

    async def create(self, template: str, data: Mapping[str, Any], **path_params: Any) -> dict[str, Any]:
        """POST a new resource. A 400 with a DRF field payload raises ValidationError(field_errors)."""
        return await self._write("POST", template, path_params, data, "Failed to create")

    async def update(
        self,
        template: str,
        data: Mapping[str, Any],
        *,
        partial: bool = False,
        **path_params: Any,
    ) -> dict[str, Any]:
        """PUT (or PATCH when partial) an existing resource."""
        method = "PATCH" if partial else "PUT"
        return await self._write(method, template, path_params, data, "Failed to update")

    async def delete(self, template: str, **path_params: Any) -> None:
        await self._write("DELETE", template, path_params, None, "Failed to delete")

    async def _write(
        self,
        method: str,
        template: str,
        path_params: Mapping[str, Any],
        data: Mapping[str, Any] | None,
        default_message: str,
    ) -> dict[str, Any]:
        url = build_endpoint(template, **path_params)
        try:
            r = await self.client.request(
                method,
                url,
                json=dict(data) if data is not None else None,
                timeout=settings.upload_timeout_seconds,
            )
        except httpx.HTTPError as e:
            logger.warning("API %s %s failed: %s", method, url, e)
            raise TransportError("Network error. Please try again later.") from e
        if r.status_code >= 400:
            _log_response_error(method, url, r)
            raise error_from_response(r, default_message)
        if not r.content:
            return {}
        try:
            body = r.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}
