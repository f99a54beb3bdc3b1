from __future__ import annotations

from typing import Optional

from fastapi import Request

from scoop.auth.config import load_auth_config
from scoop.auth.models import AppSession
from scoop.auth.session import SESSION_COOKIE, decode_session


def authenticate_request(request: Request) -> Optional[AppSession]:
    """
    Return the signed-in session carried by the `appSession` cookie, if valid.

    Invalid signatures and expired sessions both read as signed out.
    """
    cfg = load_auth_config()
    return decode_session(cfg, request.cookies.get(SESSION_COOKIE))
