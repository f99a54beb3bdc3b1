from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class AuthState:
    """Context round-tripped through the provider in the OAuth `state` parameter."""

    return_to: str = "/"
    connection: Optional[str] = None  # identity-provider hint (e.g. google-oauth2)

    @property
    def is_account_linking(self) -> bool:
        return bool(self.connection) and self.return_to == "/connected-accounts"


@dataclass(frozen=True)
class ProviderToken:
    """Token endpoint response; used once for /userinfo then embedded in the session."""

    access_token: str
    expires_in: Optional[int] = None
    id_token: Optional[str] = None

    @property
    def max_age(self) -> int:
        return self.expires_in or 3600


@dataclass
class AppSession:
    user: Dict[str, Any]
    access_token: str
    expires_at: int  # epoch milliseconds

    def to_dict(self) -> Dict[str, Any]:
        return {"user": self.user, "accessToken": self.access_token, "expiresAt": self.expires_at}


@dataclass(frozen=True)
class InternalExchange:
    """Outcome of the best-effort Auth0 -> internal JWT exchange."""

    token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None

    @property
    def has_complete_profile(self) -> bool:
        return bool(self.user and self.user.get("username") and self.user.get("phone"))


@dataclass
class CallbackResult:
    """Everything the HTTP layer needs to emit the callback response."""

    redirect_url: str
    session: AppSession
    profile: Dict[str, Any]
    cookie_max_age: int
    internal_token: Optional[str] = None
