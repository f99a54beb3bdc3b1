from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthConfig:
    # Auth0 tenant + application
    domain: Optional[str]
    client_id: Optional[str]
    client_secret: Optional[str]
    issuer_base_url: Optional[str]  # default: https://<domain>

    # Session configuration
    session_secret: Optional[str]  # Required for appSession signing
    base_url: Optional[str]  # Public app URL; also hosts the internal APIs
    cookie_secure: bool

    @property
    def provider_enabled(self) -> bool:
        """Auth0 is usable once the tenant and application credentials are configured."""
        return bool(self.issuer_base_url and self.client_id and self.client_secret)

    @property
    def callback_url(self) -> str:
        return f"{(self.base_url or '').rstrip('/')}/api/auth/callback"

    def missing_vars(self) -> List[str]:
        missing = []
        if not self.domain and not self.issuer_base_url:
            missing.append("AUTH0_DOMAIN")
        if not self.client_id:
            missing.append("AUTH0_CLIENT_ID")
        if not self.client_secret:
            missing.append("AUTH0_CLIENT_SECRET")
        if not self.session_secret:
            missing.append("AUTH0_SECRET")
        if not self.base_url:
            missing.append("AUTH0_BASE_URL or VERCEL_URL")
        return missing

    def describe(self) -> Dict[str, Any]:
        """Loggable view: never includes secret values."""
        return {
            "domain": self.domain,
            "issuerBaseURL": self.issuer_base_url,
            "clientId": "SET" if self.client_id else "MISSING",
            "clientSecret": "SET" if self.client_secret else "MISSING",
            "secret": "SET" if self.session_secret else "MISSING",
            "baseURL": self.base_url,
            "cookieSecure": self.cookie_secure,
        }


def _env(name: str) -> Optional[str]:
    return (os.getenv(name, "") or "").strip() or None


def _base_url_from_env() -> Optional[str]:
    explicit = _env("AUTH0_BASE_URL")
    if explicit:
        return explicit.rstrip("/")
    vercel = _env("VERCEL_URL")
    if vercel:
        # Vercel exposes the bare host name.
        if not vercel.startswith(("http://", "https://")):
            vercel = f"https://{vercel}"
        return vercel.rstrip("/")
    return None


@lru_cache(maxsize=1)
def load_auth_config() -> AuthConfig:
    """
    Load authentication configuration from environment variables.

    No value has a literal fallback: anything not configured stays None and is
    reported by `validate_auth_config`.
    """
    domain = _env("AUTH0_DOMAIN")
    issuer = _env("AUTH0_ISSUER_BASE_URL")
    if not issuer and domain:
        issuer = f"https://{domain}"
    base_url = _base_url_from_env()

    cookie_secure_env = (os.getenv("AUTH_COOKIE_SECURE", "") or "").strip().lower()
    if cookie_secure_env in ("1", "true", "yes", "on"):
        cookie_secure = True
    elif cookie_secure_env in ("0", "false", "no", "off"):
        cookie_secure = False
    else:
        # Default: secure cookies when base URL is https; otherwise allow local dev.
        cookie_secure = True if (base_url or "").startswith("https://") else False

    return AuthConfig(
        domain=domain,
        client_id=_env("AUTH0_CLIENT_ID"),
        client_secret=_env("AUTH0_CLIENT_SECRET"),
        issuer_base_url=issuer.rstrip("/") if issuer else None,
        session_secret=_env("AUTH0_SECRET"),
        base_url=base_url,
        cookie_secure=cookie_secure,
    )


def validate_auth_config(cfg: AuthConfig) -> bool:
    """Log which variables are missing; returns True when nothing is."""
    missing = cfg.missing_vars()
    if missing:
        logger.warning("Missing Auth0 environment variables: %s", ", ".join(missing))
        return False
    return True
