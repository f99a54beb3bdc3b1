from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[+]?[\d\s\-()]{10,}$")

BIO_MAX_CHARS = 500
REVIEW_MIN_CHARS = 10
REVIEW_MAX_CHARS = 300
REVIEW_MAX_TAGS = 5


@dataclass
class ProfileForm:
    full_name: str = ""
    email: str = ""
    phone: str = ""
    bio: str = ""
    location: str = ""
    website: str = ""
    birth_date: str = ""
    gender: str = ""
    occupation: str = ""
    company: str = ""
    interests: List[str] = field(default_factory=list)


def _is_absolute_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def validate_profile(form: ProfileForm) -> Optional[str]:
    """Return the first validation message, or None when the form can be submitted."""
    if not form.full_name or not form.full_name.strip():
        return "Full name is required"
    if not form.email or not form.email.strip():
        return "Email address is required"
    if not EMAIL_RE.match(form.email):
        return "Please enter a valid email address"
    if form.bio and len(form.bio) > BIO_MAX_CHARS:
        return f"Bio must be {BIO_MAX_CHARS} characters or less"
    if form.website and form.website.strip() and not _is_absolute_url(form.website.strip()):
        return "Please enter a valid website URL"
    if form.phone and form.phone.strip():
        if not PHONE_RE.match(re.sub(r"\s", "", form.phone)):
            return "Please enter a valid phone number"
    return None


def build_update_payload(form: ProfileForm, *, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Body for PUT /api/profile/update; empty values are dropped."""
    ts = (now or datetime.now(timezone.utc)).isoformat()
    payload: Dict[str, Any] = {
        "name": form.full_name.strip(),
        "email": form.email.strip(),
        "phone": form.phone.strip(),
        "bio": form.bio.strip(),
        "location": form.location.strip(),
        "website": form.website.strip(),
        "birthDate": form.birth_date,
        "gender": form.gender,
        "occupation": form.occupation.strip(),
        "company": form.company.strip(),
        "interests": list(form.interests or []),
        "updateType": "profile_data",
        "timestamp": ts,
    }
    return {k: v for k, v in payload.items() if v is not None and v != ""}


@dataclass
class ReviewForm:
    review_for: Optional[int] = None  # friend id
    category: str = ""
    content: str = ""
    tags: List[str] = field(default_factory=list)

    def add_tag(self, tag: str) -> bool:
        if tag in self.tags or len(self.tags) >= REVIEW_MAX_TAGS:
            return False
        self.tags.append(tag)
        return True


def validate_review(form: ReviewForm) -> Optional[str]:
    if form.review_for is None:
        return "Please select a friend to review"
    if not form.category:
        return "Please select a review category"
    if not form.content or not form.content.strip():
        return "Please write some content for your review"
    if len(form.content) > REVIEW_MAX_CHARS:
        return f"Review content must be {REVIEW_MAX_CHARS} characters or less"
    if len(form.content.strip()) < REVIEW_MIN_CHARS:
        return f"Review content must be at least {REVIEW_MIN_CHARS} characters long"
    if len(set(form.tags)) != len(form.tags) or len(form.tags) > REVIEW_MAX_TAGS:
        return f"Use up to {REVIEW_MAX_TAGS} distinct tags"
    return None


def build_post_payload(
    form: ReviewForm,
    *,
    review_for_name: str,
    user_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Body for POST /api/posts. The review category doubles as the post type."""
    payload: Dict[str, Any] = {
        "reviewFor": form.review_for,
        "reviewForName": review_for_name,
        "category": form.category,
        "content": form.content,
        "tags": list(form.tags),
        "isPublic": True,
        "type": form.category,
        "timestamp": (now or datetime.now(timezone.utc)).isoformat(),
    }
    if user_id:
        payload["userId"] = user_id
    return payload
