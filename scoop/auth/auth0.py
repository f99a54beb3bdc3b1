from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import requests

from scoop.auth import errors
from scoop.auth.config import AuthConfig
from scoop.auth.models import ProviderToken

logger = logging.getLogger(__name__)

HTTP_TIMEOUT_SECONDS = 10


def _provider_url(cfg: AuthConfig, path: str) -> str:
    if not cfg.issuer_base_url:
        raise errors.CallbackError(errors.CALLBACK_FAILED, "Auth0 domain not configured")
    return f"{cfg.issuer_base_url}{path}"


def build_authorize_url(
    cfg: AuthConfig,
    *,
    state: str,
    connection: Optional[str] = None,
) -> str:
    """
    Build the Auth0 /authorize URL.
    `connection` skips the Universal Login chooser and goes straight to that provider.
    """
    if not cfg.client_id:
        raise ValueError("Auth0 client ID not configured")
    if not cfg.base_url:
        raise ValueError("Auth0 base URL not configured")

    params = {
        "response_type": "code",
        "client_id": cfg.client_id,
        "redirect_uri": cfg.callback_url,
        "scope": "openid profile email",
        "state": state,
    }
    if connection:
        params["connection"] = connection
    return f"{_provider_url(cfg, '/authorize')}?{urlencode(params)}"


def _json_body(r: requests.Response, what: str) -> Dict[str, Any]:
    try:
        data = r.json()
    except ValueError:
        raise errors.CallbackError(errors.TOKEN_PARSE_ERROR, f"{what} response is not JSON")
    if not isinstance(data, dict):
        raise errors.CallbackError(errors.TOKEN_PARSE_ERROR, f"{what} response is not an object")
    return data


def exchange_code_for_tokens(cfg: AuthConfig, *, code: str) -> ProviderToken:
    """
    Exchange the authorization code at {issuer}/oauth/token.

    Non-2xx is a terminal `token_exchange_failed`; transport errors are `network_error`.
    """
    if not cfg.client_id or not cfg.client_secret:
        raise errors.CallbackError(errors.CALLBACK_FAILED, "Auth0 client ID/secret not configured")

    payload = {
        "grant_type": "authorization_code",
        "client_id": cfg.client_id,
        "client_secret": cfg.client_secret,
        "code": code,
        "redirect_uri": cfg.callback_url,
    }
    url = _provider_url(cfg, "/oauth/token")
    try:
        r = requests.post(url, json=payload, timeout=HTTP_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        raise errors.CallbackError(errors.NETWORK_ERROR, f"token endpoint unreachable: {type(e).__name__}")

    logger.info("Token response status: %d", r.status_code)
    if not r.ok:
        # Avoid leaking sensitive info; include minimal context.
        logger.error("Token exchange failed (status=%d)", r.status_code)
        raise errors.CallbackError(errors.TOKEN_EXCHANGE_FAILED, f"status={r.status_code}")

    data = _json_body(r, "token")
    access_token = str(data.get("access_token") or "").strip()
    if not access_token:
        raise errors.CallbackError(errors.TOKEN_PARSE_ERROR, "token response missing access_token")

    expires_in: Optional[int]
    try:
        expires_in = int(data["expires_in"]) if data.get("expires_in") is not None else None
    except (TypeError, ValueError):
        expires_in = None

    return ProviderToken(
        access_token=access_token,
        expires_in=expires_in if expires_in and expires_in > 0 else None,
        id_token=str(data.get("id_token") or "") or None,
    )


def fetch_userinfo(cfg: AuthConfig, *, access_token: str) -> Dict[str, Any]:
    """GET {issuer}/userinfo with the provider access token."""
    url = _provider_url(cfg, "/userinfo")
    try:
        r = requests.get(url, headers={"Authorization": f"Bearer {access_token}"}, timeout=HTTP_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        raise errors.CallbackError(errors.NETWORK_ERROR, f"userinfo endpoint unreachable: {type(e).__name__}")

    logger.info("User response status: %d", r.status_code)
    if not r.ok:
        logger.error("User info failed (status=%d)", r.status_code)
        raise errors.CallbackError(errors.USER_INFO_FAILED, f"status={r.status_code}")

    profile = _json_body(r, "userinfo")
    if not str(profile.get("sub") or "").strip():
        raise errors.CallbackError(errors.TOKEN_PARSE_ERROR, "userinfo response missing sub")
    return profile
