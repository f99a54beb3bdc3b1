"""
Auth0 callback flow.

start -> code_check -> token_exchange -> profile_fetch -> [admin_log]
      -> [internal_exchange] -> redirect_decision

Terminal failures raise CallbackError; the HTTP layer turns the result (or the
error) into a response.
"""

from __future__ import annotations

import logging
import time
from typing import Optional
from urllib.parse import urlparse

from scoop.auth import errors
from scoop.auth.auth0 import exchange_code_for_tokens, fetch_userinfo
from scoop.auth.config import AuthConfig, validate_auth_config
from scoop.auth.identity import annotate_account_linking, derive_identities, derive_username
from scoop.auth.internal import exchange_for_internal_token, log_auth_user
from scoop.auth.models import AppSession, AuthState, CallbackResult, InternalExchange
from scoop.auth.util import decode_state, sanitize_next_path

logger = logging.getLogger(__name__)

CONNECTED_ACCOUNTS_PATH = "/connected-accounts"
ONBOARDING_PATH = "/onboarding"


def resolve_redirect_path(state: AuthState, exchange: InternalExchange) -> str:
    if state.return_to == CONNECTED_ACCOUNTS_PATH:
        return CONNECTED_ACCOUNTS_PATH
    requested = sanitize_next_path(state.return_to)
    if requested != "/":
        return requested
    if exchange.has_complete_profile:
        return "/"
    return ONBOARDING_PATH


def absolute_url(cfg: AuthConfig, path: str) -> str:
    base = (cfg.base_url or "").strip()
    parsed = urlparse(base)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise errors.CallbackError(errors.REDIRECT_ERROR, "base URL is not an absolute http(s) URL")
    # Appending a rooted, sanitized path keeps the redirect on the base origin.
    return base.rstrip("/") + sanitize_next_path(path)


def complete_callback(cfg: AuthConfig, *, code: Optional[str], state: Optional[str]) -> CallbackResult:
    if not code:
        logger.info("No code provided, redirecting to signin")
        raise errors.CallbackError(errors.NO_CODE)

    auth_state = decode_state(state)
    logger.info("Auth state: return_to=%s connection=%s", auth_state.return_to, auth_state.connection)

    validate_auth_config(cfg)
    if not cfg.provider_enabled or not cfg.session_secret:
        raise errors.CallbackError(errors.CALLBACK_FAILED, "Auth0 is not configured")

    token = exchange_code_for_tokens(cfg, code=code)
    profile = fetch_userinfo(cfg, access_token=token.access_token)
    sub = str(profile.get("sub"))
    logger.info("Authenticated Auth0 subject %s", sub)

    log_auth_user(cfg, profile, connection=auth_state.connection)

    profile["identities"] = derive_identities(sub, profile)
    annotate_account_linking(profile, auth_state)

    session_user = {**profile, "authMethod": "auth0", "id": sub, "username": derive_username(profile)}

    exchange = exchange_for_internal_token(cfg, profile)
    if exchange.user:
        session_user = {
            **session_user,
            **exchange.user,
            "username": exchange.user.get("username") or session_user["username"],
            "phone": exchange.user.get("phone") or None,
        }

    path = resolve_redirect_path(auth_state, exchange)
    if path == CONNECTED_ACCOUNTS_PATH:
        profile["isAccountLinking"] = True
    logger.info("Final redirect path: %s (complete_profile=%s)", path, exchange.has_complete_profile)

    session = AppSession(
        user=session_user,
        access_token=token.access_token,
        expires_at=int(time.time() * 1000) + token.max_age * 1000,
    )
    return CallbackResult(
        redirect_url=absolute_url(cfg, path),
        session=session,
        profile=profile,
        cookie_max_age=token.max_age,
        internal_token=exchange.token,
    )
