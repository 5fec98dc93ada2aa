"""In-process event bus for report changes."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Subscriber = Callable[[str, Any], None]

REPORT_CREATED = "report.created"
REPORT_UPDATED = "report.updated"
REPORT_DELETED = "report.deleted"
ACTIVITY_CREATED = "activity.created"


class EventBus:
    """Fan-out of ``(event, data)`` pairs to synchronous subscribers."""

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that unsubscribes it."""
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe

    def publish(self, event: str, data: Any) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(event, data)
            except Exception:
                logger.exception("Subscriber failed for event %s", event)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
