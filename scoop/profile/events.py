"""
Event list helpers for the discover page: drop past events and apply the
search box and category filter.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"


def parse_start(value: Any, *, tz=timezone.utc) -> Optional[datetime]:
    """Parse an event `startDate`; naive values are taken to be in `tz`."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        dt = date_parser.isoparse(value.strip())
    except (ValueError, OverflowError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz)
    return dt


def upcoming_events(events: Iterable[Any], *, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """
    Keep events starting on or after the start of the current day.

    Events without a readable `startDate` are dropped.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)

    out: List[Dict[str, Any]] = []
    for event in events:
        if not isinstance(event, dict):
            continue
        start = parse_start(event.get("startDate"), tz=now.tzinfo)
        if start is None:
            logger.debug("Skipping event %s with unreadable startDate", event.get("id"))
            continue
        if start >= today:
            out.append(event)
    return out


def _matches_query(event: Dict[str, Any], query: str) -> bool:
    location = event.get("location") if isinstance(event.get("location"), dict) else {}
    fields = [event.get("title"), event.get("description"), location.get("address")]
    fields.extend(event.get("tags") or [])
    return any(isinstance(f, str) and query in f.lower() for f in fields)


def filter_events(
    events: Iterable[Dict[str, Any]],
    *,
    query: str = "",
    category: str = ALL_CATEGORIES,
) -> List[Dict[str, Any]]:
    """Case-insensitive search over title, description, address and tags, then the category filter."""
    q = (query or "").strip().lower()
    out = list(events)
    if q:
        out = [e for e in out if _matches_query(e, q)]
    if category and category != ALL_CATEGORIES:
        out = [e for e in out if e.get("category") == category]
    return out
