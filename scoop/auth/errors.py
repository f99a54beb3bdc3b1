from __future__ import annotations

from typing import Optional

# Terminal provider-facing failures: surfaced as /signin?error=<kind>.
NO_CODE = "no_code"
TOKEN_EXCHANGE_FAILED = "token_exchange_failed"
USER_INFO_FAILED = "user_info_failed"

# Failures rendered on the error page.
NETWORK_ERROR = "network_error"
TOKEN_PARSE_ERROR = "token_parse_error"
REDIRECT_ERROR = "redirect_error"
CALLBACK_FAILED = "callback_failed"

SIGNIN_REDIRECT_KINDS = frozenset({NO_CODE, TOKEN_EXCHANGE_FAILED, USER_INFO_FAILED})

_MESSAGES = {
    NETWORK_ERROR: "Network error during authentication",
    TOKEN_PARSE_ERROR: "Token parsing error",
    REDIRECT_ERROR: "Redirect configuration error",
    CALLBACK_FAILED: "Authentication failed",
}


class CallbackError(Exception):
    """A callback failure tagged with its kind at the site where it happened."""

    def __init__(self, kind: str, detail: Optional[str] = None):
        super().__init__(detail or kind)
        self.kind = kind
        self.detail = detail

    @property
    def redirects_to_signin(self) -> bool:
        return self.kind in SIGNIN_REDIRECT_KINDS

    @property
    def user_message(self) -> str:
        return _MESSAGES.get(self.kind, _MESSAGES[CALLBACK_FAILED])
