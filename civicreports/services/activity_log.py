"""Append-only activity log."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timezone

from civicreports.schemas.activity import Activity, ActivityResponse, ActivityType

logger = logging.getLogger(__name__)


class ActivityLog:
    """Most-recent-first list of change events.

    Entries are never edited. With ``limit`` set, the oldest entries are
    dropped once the log grows past it.
    """

    def __init__(self, limit: int = 0) -> None:
        self._entries: list[Activity] = []
        self._next_id = 1
        self._limit = limit
        self._lock = threading.Lock()

    def append(
        self,
        type: ActivityType,
        title: str,
        description: str,
        related_report_id: int | None = None,
        related_item_id: str | None = None,
        user_id: str | None = None,
        user_name: str | None = None,
        created_at: datetime | None = None,
    ) -> Activity:
        with self._lock:
            activity = Activity(
                id=self._next_id,
                type=type,
                title=title,
                description=description,
                related_report_id=related_report_id,
                related_item_id=related_item_id,
                user_id=user_id,
                user_name=user_name,
                created_at=created_at or datetime.now(timezone.utc),
            )
            self._next_id += 1
            self._entries.insert(0, activity)
            if self._limit and len(self._entries) > self._limit:
                del self._entries[self._limit :]
        logger.debug("Activity %s: %s", activity.type.value, activity.description)
        return activity

    def all(self) -> list[Activity]:
        with self._lock:
            return list(self._entries)

    def query(self, predicate: Callable[[Activity], bool]) -> list[Activity]:
        return [a for a in self.all() if predicate(a)]

    def recent(self, n: int) -> list[Activity]:
        return self.all()[:n]

    def for_report(self, report_id: int) -> list[Activity]:
        return self.query(lambda a: a.related_report_id == report_id)

    def for_user(self, user_id: str) -> list[Activity]:
        """Activities performed by the user or about the user."""
        return self.query(lambda a: a.user_id == user_id or a.related_item_id == user_id)

    def for_category(self, category_id: str) -> list[Activity]:
        return self.query(lambda a: a.related_item_id == category_id)

    def __len__(self) -> int:
        return len(self._entries)


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'} ago"


def relative_time(created_at: datetime, now: datetime | None = None) -> str:
    """Human "time ago" label; switches to a calendar date after 30 days."""
    now = now or datetime.now(timezone.utc)
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    seconds = int((now - created_at).total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24
    if seconds < 60:
        return "Just now"
    if minutes < 60:
        return _plural(minutes, "minute")
    if hours < 24:
        return _plural(hours, "hour")
    if days < 30:
        return _plural(days, "day")
    return f"{created_at.month}/{created_at.day}/{created_at.year}"


def with_relative_time(activities: list[Activity], now: datetime | None = None) -> list[ActivityResponse]:
    """Attach a freshly computed ``time`` label to each activity."""
    now = now or datetime.now(timezone.utc)
    return [
        ActivityResponse(**a.model_dump(), time=relative_time(a.created_at, now))
        for a in activities
    ]
