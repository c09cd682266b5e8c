"""
Client-side error taxonomy: validation, authentication, transport and not-found.
HTTP responses are mapped onto these in one place (error_from_response).
"""
from __future__ import annotations

from typing import Any

import httpx

# Keys that carry a whole-request message rather than a form field error
NON_FIELD_KEYS = frozenset({"detail", "error", "message"})


class PortalError(Exception):
    """Base error for everything raised by the client."""

    def __init__(self, message: str = "", *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(PortalError):
    """Malformed input; field_errors maps form field -> message (may be empty)."""

    def __init__(
        self,
        message: str = "Please fix the form errors",
        field_errors: dict[str, str] | None = None,
        *,
        status_code: int | None = 400,
    ):
        super().__init__(message, status_code=status_code)
        self.field_errors = field_errors or {}


class AuthenticationError(PortalError):
    """Missing, invalid or expired credentials. The caller should send the user to login."""

    def __init__(self, reason: str, message: str = "", *, status_code: int | None = None):
        super().__init__(message or f"Authentication required ({reason})", status_code=status_code)
        self.reason = reason


class TransportError(PortalError):
    """Network failure or a non-2xx response that is not one of the cases above."""

    def __init__(self, message: str, *, status_code: int | None = None, detail: Any = None):
        super().__init__(message, status_code=status_code)
        self.detail = detail


class NotFoundError(PortalError):
    """Requested single resource does not exist."""


def map_field_errors(payload: Any) -> dict[str, str]:
    """
    DRF 400 body -> {field: message}. List values are joined with a space.
    Non-field keys (detail/error/message) are skipped; empty result means "use a generic message".
    """
    if not isinstance(payload, dict):
        return {}
    out: dict[str, str] = {}
    for key, value in payload.items():
        if key in NON_FIELD_KEYS:
            continue
        if isinstance(value, list):
            out[key] = " ".join(str(v) for v in value)
        elif value is not None:
            out[key] = str(value)
    return out


def _response_payload(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _pick_message(payload: Any, default_message: str) -> str:
    if isinstance(payload, dict):
        for key in ("detail", "error", "message"):
            value = payload.get(key)
            if value:
                return str(value)
    return default_message


def error_from_response(response: httpx.Response, default_message: str = "Request failed") -> PortalError:
    """Map a non-2xx response to the matching PortalError subclass."""
    status = response.status_code
    payload = _response_payload(response)
    message = _pick_message(payload, default_message)
    if status == 400:
        field_errors = map_field_errors(payload)
        if field_errors:
            return ValidationError("Please fix the form errors", field_errors)
        return ValidationError(message, {})
    if status in (401, 403):
        return AuthenticationError("rejected_token", message, status_code=status)
    if status == 404:
        return NotFoundError(message, status_code=status)
    return TransportError(message, status_code=status, detail=payload)
