from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Optional
from urllib.parse import quote

from scoop.auth.models import AuthState

logger = logging.getLogger(__name__)


# Reserved characters that may legitimately appear in a redirect path or query.
_PATH_SAFE_CHARS = "/?&=#%:@!$'()*+,;"


def sanitize_next_path(next_path: str | None) -> str:
    """
    Prevent open-redirects: allow only relative paths like `/profile`.

    The result is percent-encoded so it can go straight into a `Location` header.
    """
    p = (next_path or "").strip()
    if not p:
        return "/"
    if not p.startswith("/"):
        return "/"
    # Disallow scheme-relative: `//evil.com` (and the backslash variant browsers normalize).
    if p.startswith("//") or p.startswith("/\\"):
        return "/"
    # Keep it simple: strip any CR/LF.
    p = p.replace("\r", "").replace("\n", "")
    return quote(p, safe=_PATH_SAFE_CHARS) or "/"


def encode_state(return_to: str = "/", connection: Optional[str] = None) -> str:
    raw = json.dumps({"returnTo": return_to, "connection": connection}, separators=(",", ":"))
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def decode_state(value: str | None) -> AuthState:
    """
    Parse the base64-JSON `state` parameter.

    Never raises: anything unparseable yields the default state.
    """
    if not value:
        return AuthState()
    try:
        s = value.strip()
        s += "=" * (-len(s) % 4)
        # Accept both the standard and the URL-safe alphabet.
        raw = base64.b64decode(s.replace("-", "+").replace("_", "/"), validate=True)
        data = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError, RecursionError) as e:
        logger.info("Failed to parse OAuth state, using defaults (%s)", type(e).__name__)
        return AuthState()
    if not isinstance(data, dict):
        logger.info("OAuth state is not an object, using defaults")
        return AuthState()

    return_to = data.get("returnTo")
    connection = data.get("connection")
    return AuthState(
        return_to=str(return_to) if isinstance(return_to, str) and return_to else "/",
        connection=str(connection) if isinstance(connection, str) and connection else None,
    )
