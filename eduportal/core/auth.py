"""Stored auth tokens and the single accessor that derives the current user from them."""

import json
import logging
import os
import time
from pathlib import Path
from typing import Any

from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError

from eduportal.config import settings
from eduportal.core.errors import AuthenticationError

logger = logging.getLogger(__name__)


class AuthTokens(BaseModel):
    """Token pair as issued by auth/token/ (plus the user id some logins store next to it)."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    access: str | None = None
    refresh: str | None = None
    user_id: str | None = None


class TokenInfo(BaseModel):
    user: Any = None
    exp: float | None = None
    iat: float | None = None
    expires_in: float = 0.0
    is_expired: bool = True


class AuthContext(BaseModel):
    """Identity passed explicitly to list views instead of reading storage per page."""

    user_id: str
    access_token: str


class TokenStore:
    """JSON file holding AuthTokens; the process-wide session state set at login, cleared at logout."""

    def __init__(self, path: str | os.PathLike | None = None):
        self.path = Path(path or settings.auth_tokens_path)

    def load(self) -> AuthTokens | None:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return AuthTokens.model_validate(data)
        except (OSError, ValueError, PydanticValidationError) as e:
            logger.warning("Auth tokens at %s are unreadable: %s", self.path, e)
            return None

    def save(self, tokens: AuthTokens) -> None:
        self.path.write_text(tokens.model_dump_json(exclude_none=True), encoding="utf-8")

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass


def decode_token_claims(token: str) -> dict[str, Any]:
    """JWT payload without signature verification (the API verifies; we only read claims)."""
    try:
        return jwt.get_unverified_claims(token)
    except JWTError as e:
        raise AuthenticationError("malformed_token") from e


def is_token_expired(token: str | None, now: float | None = None) -> bool:
    """Missing, undecodable or exp-less tokens count as expired."""
    if not token:
        return True
    try:
        payload = decode_token_claims(token)
    except AuthenticationError:
        return True
    exp = payload.get("exp")
    if not isinstance(exp, (int, float)):
        return True
    current = time.time() if now is None else now
    return exp < current


def token_info(token: str | None, now: float | None = None) -> TokenInfo | None:
    if not token:
        return None
    try:
        payload = decode_token_claims(token)
    except AuthenticationError:
        return None
    current = time.time() if now is None else now
    exp = payload.get("exp")
    expires_in = max(0.0, exp - current) if isinstance(exp, (int, float)) else 0.0
    return TokenInfo(
        user=payload.get("user"),
        exp=exp,
        iat=payload.get("iat"),
        expires_in=expires_in,
        is_expired=is_token_expired(token, now=current),
    )


def _user_id_from_claims(payload: dict[str, Any]) -> str | None:
    for claim in ("user_id", "id"):
        value = payload.get(claim)
        if value is not None and value != "":
            return str(value)
    return None


def resolve_auth_context(store: TokenStore | None = None, now: float | None = None) -> AuthContext:
    """
    Build AuthContext from stored tokens. User id: claim user_id, then id, then stored user_id.
    Raises AuthenticationError with reason missing_token / malformed_token / expired_token / missing_user_id.
    """
    store = store or TokenStore()
    tokens = store.load()
    if tokens is None or not tokens.access:
        logger.info("No stored access token")
        raise AuthenticationError("missing_token")
    payload = decode_token_claims(tokens.access)
    if is_token_expired(tokens.access, now=now):
        logger.info("Stored access token is expired")
        raise AuthenticationError("expired_token")
    user_id = _user_id_from_claims(payload) or tokens.user_id
    if not user_id:
        raise AuthenticationError("missing_user_id")
    return AuthContext(user_id=user_id, access_token=tokens.access)
