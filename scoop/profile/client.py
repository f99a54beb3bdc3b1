"""
Clients for the app's own JSON APIs (profile update, posts, friends, events).

The profile client retries server errors (5xx) and transport failures with
linear backoff, never authentication failures. Post and event calls are
single-shot and map failures to the messages the pages show.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

import requests

from scoop.profile.events import upcoming_events
from scoop.profile.forms import ReviewForm, build_post_payload, validate_review

logger = logging.getLogger(__name__)

HTTP_TIMEOUT_SECONDS = 10
MAX_ATTEMPTS = 3
BACKOFF_SECONDS = 1.0

AUTH_FAILED_MESSAGE = "Authentication failed - please sign in again"
NETWORK_FAILED_MESSAGE = "Network error - please check your connection and try again"

POST_FAILED_MESSAGE = "Unable to post at this time"
POST_STATUS_MESSAGES = {
    400: "Invalid post data - please check your content and try again",
    401: "Authentication required - please sign in and try again",
    403: "You don't have permission to create posts",
}
POST_SERVER_ERROR_MESSAGE = "Server error - please try again in a moment"

EVENTS_LOAD_FAILED_MESSAGE = "Failed to load events"
EVENT_JOIN_FAILED_MESSAGE = "Failed to join event"


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ProfileUpdateError(ApiError):
    pass


class PostError(ApiError):
    pass


class EventsError(ApiError):
    pass


class _ApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        cookies: Optional[Dict[str, str]] = None,
        auth_token: Optional[str] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.cookies = dict(cookies or {})
        self.auth_token = auth_token

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"


class ProfileClient(_ApiClient):
    def __init__(
        self,
        base_url: str,
        *,
        cookies: Optional[Dict[str, str]] = None,
        auth_token: Optional[str] = None,
        max_attempts: int = MAX_ATTEMPTS,
        backoff_seconds: float = BACKOFF_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__(base_url, cookies=cookies, auth_token=auth_token)
        self.max_attempts = max(1, max_attempts)
        self.backoff_seconds = backoff_seconds
        self._sleep = sleep

    def update_profile(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        PUT /api/profile/update and return the updated user.

        Raises:
            ProfileUpdateError: auth failure (401/403, not retried), a rejected
                update, or the last attempt failing.
        """
        url = self._url("/api/profile/update")
        attempt = 0
        while True:
            attempt += 1
            logger.info("Profile update attempt %d/%d", attempt, self.max_attempts)
            try:
                r = requests.put(
                    url, json=payload, headers=self._headers(), cookies=self.cookies, timeout=HTTP_TIMEOUT_SECONDS
                )
            except requests.RequestException as e:
                logger.warning("Profile update attempt %d failed: %s", attempt, type(e).__name__)
                if attempt >= self.max_attempts:
                    raise ProfileUpdateError(NETWORK_FAILED_MESSAGE)
                self._sleep(self.backoff_seconds * attempt)
                continue

            if r.ok:
                try:
                    result = r.json()
                except ValueError:
                    raise ProfileUpdateError("Server returned invalid response", r.status_code)
                if isinstance(result, dict) and result.get("success"):
                    user = result.get("user")
                    return user if isinstance(user, dict) else {}
                error = result.get("error") if isinstance(result, dict) else None
                raise ProfileUpdateError(str(error or "Update failed"), r.status_code)

            if r.status_code in (401, 403):
                raise ProfileUpdateError(AUTH_FAILED_MESSAGE, r.status_code)

            if r.status_code >= 500 and attempt < self.max_attempts:
                logger.info("Retrying due to server error (%d)", r.status_code)
                self._sleep(self.backoff_seconds * attempt)
                continue

            raise ProfileUpdateError(f"Server error ({r.status_code}): {r.text}", r.status_code)


class PostClient(_ApiClient):
    def list_friends(self) -> List[Dict[str, Any]]:
        """GET /api/friends. The composer still works without a friend list, so failures read as empty."""
        try:
            r = requests.get(
                self._url("/api/friends"), headers=self._headers(), cookies=self.cookies, timeout=HTTP_TIMEOUT_SECONDS
            )
        except requests.RequestException as e:
            logger.warning("Error loading friends: %s", type(e).__name__)
            return []
        if not r.ok:
            logger.warning("Friends API not available (status=%d)", r.status_code)
            return []
        try:
            data = r.json()
        except ValueError:
            logger.warning("Friends API returned an unreadable body")
            return []
        friends = data.get("friends") if isinstance(data, dict) else None
        if not isinstance(friends, list):
            return []
        logger.info("Loaded %d friends", len(friends))
        return [f for f in friends if isinstance(f, dict)]

    def create_post(
        self,
        form: ReviewForm,
        *,
        review_for_name: str,
        user_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Validate the review and POST it to /api/posts.

        Returns the server's result. Invalid forms are rejected before any
        request is made.

        Raises:
            PostError: validation failure, transport failure or a rejected post.
        """
        problem = validate_review(form)
        if problem:
            raise PostError(problem)

        payload = build_post_payload(form, review_for_name=review_for_name, user_id=user_id, now=now)
        try:
            r = requests.post(
                self._url("/api/posts"),
                json=payload,
                headers=self._headers(),
                cookies=self.cookies,
                timeout=HTTP_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            logger.warning("Post creation failed: %s", type(e).__name__)
            raise PostError(NETWORK_FAILED_MESSAGE)

        logger.info("Post creation response status: %d", r.status_code)
        try:
            result = r.json()
        except ValueError:
            raise PostError(POST_SERVER_ERROR_MESSAGE, r.status_code)

        if r.ok and isinstance(result, dict) and result.get("success"):
            return result

        if r.status_code in POST_STATUS_MESSAGES:
            message = POST_STATUS_MESSAGES[r.status_code]
        elif r.status_code >= 500:
            message = POST_SERVER_ERROR_MESSAGE
        else:
            error = result.get("error") if isinstance(result, dict) else None
            message = str(error or POST_FAILED_MESSAGE)
        raise PostError(message, r.status_code)


class EventsClient(_ApiClient):
    def discover(self, *, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """GET /api/events/discover, keeping events that start today or later."""
        try:
            r = requests.get(
                self._url("/api/events/discover"),
                headers=self._headers(),
                cookies=self.cookies,
                timeout=HTTP_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            logger.warning("Error loading events: %s", type(e).__name__)
            raise EventsError(EVENTS_LOAD_FAILED_MESSAGE)
        if not r.ok:
            raise EventsError(EVENTS_LOAD_FAILED_MESSAGE, r.status_code)
        try:
            data = r.json()
        except ValueError:
            raise EventsError(EVENTS_LOAD_FAILED_MESSAGE, r.status_code)
        events = data.get("events") if isinstance(data, dict) else None
        if not isinstance(events, list):
            raise EventsError(EVENTS_LOAD_FAILED_MESSAGE, r.status_code)

        current = upcoming_events(events, now=now)
        logger.info("Loaded events: %d (of %d)", len(current), len(events))
        return current

    def join(self, event_id: str) -> Dict[str, Any]:
        """POST /api/events/{id}/join. Returns the server body (may be empty)."""
        url = self._url(f"/api/events/{quote(str(event_id), safe='')}/join")
        try:
            r = requests.post(url, headers=self._headers(), cookies=self.cookies, timeout=HTTP_TIMEOUT_SECONDS)
        except requests.RequestException as e:
            logger.warning("Error joining event %s: %s", event_id, type(e).__name__)
            raise EventsError(EVENT_JOIN_FAILED_MESSAGE)

        try:
            body = r.json()
        except ValueError:
            body = None

        if r.ok:
            return body if isinstance(body, dict) else {}
        reason = body.get("message") if isinstance(body, dict) else None
        message = f"{EVENT_JOIN_FAILED_MESSAGE}: {reason}" if reason else EVENT_JOIN_FAILED_MESSAGE
        raise EventsError(message, r.status_code)
