from __future__ import annotations

import json
import time
from typing import Any, Dict, Optional
from urllib.parse import quote

from itsdangerous import BadSignature, BadTimeSignature, URLSafeTimedSerializer

from scoop.auth.config import AuthConfig
from scoop.auth.models import AppSession

SESSION_COOKIE = "appSession"
USER_DATA_COOKIE = "auth0UserData"
AUTH_TOKEN_COOKIE = "authToken"

# Lifetime of the internal JWT cookie, independent of the provider token expiry.
AUTH_TOKEN_MAX_AGE = 7 * 24 * 60 * 60

SESSION_SALT = "scoop-app-session-v1"


def _serializer(cfg: AuthConfig) -> Optional[URLSafeTimedSerializer]:
    if not cfg.session_secret:
        return None
    return URLSafeTimedSerializer(secret_key=cfg.session_secret, salt=SESSION_SALT)


def encode_session(cfg: AuthConfig, session: AppSession) -> Optional[str]:
    s = _serializer(cfg)
    if s is None:
        return None
    raw = json.dumps(session.to_dict(), separators=(",", ":"), sort_keys=True)
    return s.dumps(raw)


def decode_session(cfg: AuthConfig, value: str | None, *, max_age: Optional[int] = None) -> Optional[AppSession]:
    if not value:
        return None
    s = _serializer(cfg)
    if s is None:
        return None
    try:
        raw = s.loads(value, max_age=max_age)
        data = json.loads(raw)
    except (BadSignature, BadTimeSignature, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    user = data.get("user")
    if not isinstance(user, dict):
        return None
    try:
        expires_at = int(data.get("expiresAt") or 0)
    except (TypeError, ValueError):
        return None
    if expires_at and expires_at <= int(time.time() * 1000):
        return None
    return AppSession(user=user, access_token=str(data.get("accessToken") or ""), expires_at=expires_at)


def _cookie_kwargs(cfg: AuthConfig, *, key: str, value: str, max_age: int, httponly: bool) -> Dict[str, Any]:
    return {
        "key": key,
        "value": value,
        "max_age": max_age,
        "httponly": httponly,
        "secure": cfg.cookie_secure,
        "samesite": "lax",
        "path": "/",
    }


def session_cookie_kwargs(cfg: AuthConfig, value: str, max_age: int) -> Dict[str, Any]:
    return _cookie_kwargs(cfg, key=SESSION_COOKIE, value=value, max_age=max_age, httponly=True)


def user_data_cookie_kwargs(cfg: AuthConfig, profile: Dict[str, Any], max_age: int) -> Dict[str, Any]:
    # Read by client scripts with decodeURIComponent(), so percent-encode like the browser would.
    value = quote(json.dumps(profile, separators=(",", ":")), safe="")
    return _cookie_kwargs(cfg, key=USER_DATA_COOKIE, value=value, max_age=max_age, httponly=False)


def auth_token_cookie_kwargs(cfg: AuthConfig, token: str) -> Dict[str, Any]:
    return _cookie_kwargs(cfg, key=AUTH_TOKEN_COOKIE, value=token, max_age=AUTH_TOKEN_MAX_AGE, httponly=True)


def clear_cookie_kwargs(cfg: AuthConfig, key: str) -> Dict[str, Any]:
    return _cookie_kwargs(cfg, key=key, value="", max_age=0, httponly=key != USER_DATA_COOKIE)
