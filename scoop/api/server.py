"""
Scoop auth server.

Serves the Auth0 sign-in endpoints (login, callback, status, logout) for the
web app. The callback completes the provider handshake, sets the session
cookies, and hands the browser off to its destination.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response

from scoop.auth import errors
from scoop.auth.config import AuthConfig
from scoop.auth.session import AUTH_TOKEN_COOKIE, SESSION_COOKIE, USER_DATA_COOKIE

logger = logging.getLogger(__name__)

app = FastAPI(title="Scoop auth")


def _signin_url(cfg: AuthConfig, kind: str) -> str:
    base = (cfg.base_url or "").strip().rstrip("/")
    return f"{base}/signin?error={kind}"


def _no_store(resp: Response) -> Response:
    resp.headers["Cache-Control"] = "no-store"
    return resp


@app.on_event("startup")
def _startup_check_auth_config() -> None:
    """
    Report missing Auth0 settings at startup.
    This should never prevent the server from starting; the callback reports again per request.
    """
    from scoop.auth.config import load_auth_config, validate_auth_config

    cfg = load_auth_config()
    if validate_auth_config(cfg):
        logger.info("Auth0 config: %s", cfg.describe())


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming HTTP requests."""
    start_time = time.time()
    logger.debug("%s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
        process_time = time.time() - start_time
        logger.debug("%s %s - %d (%.3fs)", request.method, request.url.path, response.status_code, process_time)
        return response
    except Exception as e:
        process_time = time.time() - start_time
        logger.exception("%s %s - ERROR after %.3fs: %s", request.method, request.url.path, process_time, str(e))
        raise


@app.get("/healthz")
def healthz() -> Dict[str, Any]:
    return {"ok": True}


@app.get("/api/auth/login")
def auth_login(
    return_to: str = Query("/", alias="returnTo"),
    connection: Optional[str] = Query(None),
):
    """Start the Auth0 flow; `state` carries the destination and the connection hint."""
    from scoop.auth.auth0 import build_authorize_url
    from scoop.auth.config import load_auth_config
    from scoop.auth.util import encode_state, sanitize_next_path

    cfg = load_auth_config()
    if not cfg.provider_enabled or not cfg.base_url:
        raise HTTPException(status_code=503, detail="Auth0 is not configured")

    connection = (connection or "").strip() or None
    state = encode_state(sanitize_next_path(return_to), connection)
    url = build_authorize_url(cfg, state=state, connection=connection)
    return _no_store(RedirectResponse(url=url, status_code=302))


@app.get("/api/auth/callback")
def auth_callback(code: Optional[str] = Query(None), state: Optional[str] = Query(None)):
    """Handle the Auth0 redirect after the user authenticates."""
    from scoop.auth.callback import complete_callback
    from scoop.auth.config import load_auth_config
    from scoop.auth.pages import render_bootstrap_page, render_error_page
    from scoop.auth.session import (
        auth_token_cookie_kwargs,
        encode_session,
        session_cookie_kwargs,
        user_data_cookie_kwargs,
    )

    cfg = load_auth_config()
    try:
        result = complete_callback(cfg, code=code, state=state)

        session_value = encode_session(cfg, result.session)
        if not session_value:
            raise errors.CallbackError(errors.CALLBACK_FAILED, "Session signing is not configured (AUTH0_SECRET)")

        resp: Response
        if result.internal_token:
            resp = HTMLResponse(content=render_bootstrap_page(result.internal_token, result.redirect_url))
        else:
            resp = RedirectResponse(url=result.redirect_url, status_code=302)
        resp.set_cookie(**session_cookie_kwargs(cfg, session_value, result.cookie_max_age))
        resp.set_cookie(**user_data_cookie_kwargs(cfg, result.profile, result.cookie_max_age))
        if result.internal_token:
            resp.set_cookie(**auth_token_cookie_kwargs(cfg, result.internal_token))
        return _no_store(resp)
    except errors.CallbackError as e:
        if e.redirects_to_signin:
            return _no_store(RedirectResponse(url=_signin_url(cfg, e.kind), status_code=302))
        logger.error("Auth0 callback failed: kind=%s detail=%s", e.kind, e.detail)
        return _no_store(HTMLResponse(content=render_error_page(e.kind, e.user_message)))
    except Exception:
        logger.exception("Critical error in Auth0 callback")
        failed = errors.CallbackError(errors.CALLBACK_FAILED)
        return _no_store(HTMLResponse(content=render_error_page(failed.kind, failed.user_message)))


@app.get("/api/auth/status")
def auth_status(request: Request) -> JSONResponse:
    from scoop.auth.deps import authenticate_request

    session = authenticate_request(request)
    if session is None:
        return _no_store(JSONResponse(status_code=401, content={"authenticated": False}))
    return _no_store(
        JSONResponse(content={"authenticated": True, "user": session.user, "expiresAt": session.expires_at})
    )


@app.post("/api/auth/logout")
def auth_logout() -> JSONResponse:
    from scoop.auth.config import load_auth_config
    from scoop.auth.session import clear_cookie_kwargs

    cfg = load_auth_config()
    resp = JSONResponse(content={"ok": True})
    for key in (SESSION_COOKIE, USER_DATA_COOKIE, AUTH_TOKEN_COOKIE):
        resp.set_cookie(**clear_cookie_kwargs(cfg, key))
    return _no_store(resp)


def run(host: str = "0.0.0.0", port: int = 3000) -> None:
    import uvicorn

    # Configure logging for the application
    log_level = os.getenv("LOG_LEVEL", "info").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.setLevel(getattr(logging, log_level, logging.INFO))

    # Map Python logging levels to uvicorn log levels
    uvicorn_log_level = (
        log_level.lower() if log_level.lower() in ["critical", "error", "warning", "info", "debug", "trace"] else "info"
    )

    logger.info("Starting auth server on %s:%d (log_level=%s)", host, port, log_level)
    uvicorn.run(app, host=host, port=port, log_level=uvicorn_log_level)
