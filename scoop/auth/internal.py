from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import jwt  # PyJWT
import requests
from pydantic import BaseModel, ValidationError

from scoop.auth.config import AuthConfig
from scoop.auth.identity import derive_username
from scoop.auth.models import InternalExchange

logger = logging.getLogger(__name__)

HTTP_TIMEOUT_SECONDS = 10


class ExchangeResponse(BaseModel):
    token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None


def _internal_url(cfg: AuthConfig, path: str) -> str:
    return f"{(cfg.base_url or '').rstrip('/')}{path}"


def log_auth_user(cfg: AuthConfig, profile: Dict[str, Any], *, connection: Optional[str]) -> bool:
    """
    Record the authenticated identity with the admin API.

    Best-effort: never raises, returns whether the call was accepted.
    """
    payload = {
        "user_id": profile.get("sub"),
        "email": profile.get("email"),
        "name": profile.get("name"),
        "picture": profile.get("picture"),
        "connection": connection or "auth0",
    }
    try:
        r = requests.post(
            _internal_url(cfg, "/api/admin/users?action=log-auth0-user"),
            json=payload,
            timeout=HTTP_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        logger.warning("Failed to log Auth0 user to admin system: %s", type(e).__name__)
        return False
    if not r.ok:
        logger.warning("Admin logging rejected (status=%d)", r.status_code)
        return False
    logger.info("Admin logging successful")
    return True


def _is_jwt(token: str) -> bool:
    # The backend signs with its own key; only the structure is checked here.
    try:
        jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return False
    return True


def exchange_for_internal_token(cfg: AuthConfig, profile: Dict[str, Any]) -> InternalExchange:
    """
    Exchange the Auth0 identity for a backend-issued JWT.

    Any failure (network, non-2xx, unparseable body, malformed token) yields an
    empty InternalExchange so the caller falls back to a provider-only session.
    """
    payload = {
        "auth0UserId": profile.get("sub"),
        "email": profile.get("email"),
        "name": profile.get("name"),
        "username": derive_username(profile),
        "phone": None,
    }
    try:
        r = requests.post(_internal_url(cfg, "/api/auth/exchange-auth0"), json=payload, timeout=HTTP_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        logger.warning("JWT exchange error: %s", type(e).__name__)
        return InternalExchange()

    logger.info("Exchange response status: %d", r.status_code)
    if not r.ok:
        logger.warning("JWT exchange failed (status=%d)", r.status_code)
        return InternalExchange()

    try:
        body = ExchangeResponse.model_validate(r.json())
    except (ValueError, ValidationError) as e:
        logger.warning("JWT exchange returned an unreadable body: %s", type(e).__name__)
        return InternalExchange()

    token = (body.token or "").strip() or None
    if token is not None and not _is_jwt(token):
        logger.warning("JWT exchange returned a malformed token; ignoring it")
        return InternalExchange()

    logger.info("JWT exchange successful (token=%s, backend_user=%s)", bool(token), bool(body.user))
    return InternalExchange(token=token, user=body.user)
