"""
Profile enrichment derived from the Auth0 subject and the OAuth state.

Auth0 subjects look like `<provider>|<local id>`; only the social connections
the app supports are turned into identities.
"""

from __future__ import annotations

from typing import Any, Dict, List

from scoop.auth.models import AuthState

SOCIAL_PROVIDERS = ("linkedin", "google-oauth2", "facebook")

PLATFORM_NAMES = {
    "google-oauth2": "Google",
    "facebook": "Facebook",
    "linkedin": "LinkedIn",
}


def derive_identities(sub: str, profile: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Return at most one identity for a known `provider|id` subject, else []."""
    for provider in SOCIAL_PROVIDERS:
        prefix = f"{provider}|"
        if sub.startswith(prefix):
            return [
                {
                    "provider": provider,
                    "connection": provider,
                    "user_id": sub.split("|")[1],
                    "isSocial": True,
                    "profileData": {
                        "name": profile.get("name"),
                        "email": profile.get("email"),
                        "picture": profile.get("picture"),
                    },
                }
            ]
    return []


def email_local_part(email: Any) -> str:
    if not isinstance(email, str) or not email:
        return ""
    return email.split("@")[0]


def derive_username(profile: Dict[str, Any]) -> str:
    # email local part, then nickname, then first word of the name
    local = email_local_part(profile.get("email"))
    if local:
        return local
    nickname = profile.get("nickname")
    if isinstance(nickname, str) and nickname:
        return nickname
    name = profile.get("name")
    if isinstance(name, str) and name:
        first = name.split(" ")[0]
        if first:
            return first
    return "user"


def annotate_account_linking(profile: Dict[str, Any], state: AuthState) -> Dict[str, Any]:
    """Mark the platform being linked when the flow started from /connected-accounts."""
    if not state.is_account_linking:
        return profile
    platform = PLATFORM_NAMES.get(state.connection or "")
    email = profile.get("email")
    if platform and email:
        profile["connectedPlatform"] = platform
        profile["connectedUsername"] = email_local_part(email)
    return profile
