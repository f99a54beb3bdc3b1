"""
Client-side helpers for the app pages: profile and review form validation,
event list filtering, and the clients for the profile, post, friends and
events APIs.
"""

from scoop.profile.client import (
    ApiError,
    EventsClient,
    EventsError,
    PostClient,
    PostError,
    ProfileClient,
    ProfileUpdateError,
)
from scoop.profile.events import filter_events, upcoming_events
from scoop.profile.forms import (
    ProfileForm,
    ReviewForm,
    build_post_payload,
    build_update_payload,
    validate_profile,
    validate_review,
)

__all__ = [
    "ApiError",
    "EventsClient",
    "EventsError",
    "PostClient",
    "PostError",
    "ProfileClient",
    "ProfileUpdateError",
    "ProfileForm",
    "ReviewForm",
    "build_post_payload",
    "build_update_payload",
    "filter_events",
    "upcoming_events",
    "validate_profile",
    "validate_review",
]
