"""Dashboard filter state, one per session."""

from __future__ import annotations

import calendar
import copy
import threading
from collections import OrderedDict
from collections.abc import Callable
from datetime import date
from typing import Literal

TimeFrame = Literal["day", "week", "month", "year"]
View = Literal["reports", "categories"]

TIME_FRAMES = ("day", "week", "month", "year")

# Used for day ranges when no year is selected
_LEAP_YEAR = 2024


def days_in_month(year: int | None, month: int) -> int:
    """Number of days in ``month`` (1-12); February has 29 without a year."""
    return calendar.monthrange(year if year is not None else _LEAP_YEAR, month)[1]


class FilterState:
    """Time window, status visibility and category selection for a dashboard.

    Months are 1-indexed. Changing the year or month keeps ``selected_day``
    inside the new month: a day past the end is clamped to the last day and
    a missing day becomes 1.
    """

    def __init__(self, today: date | None = None) -> None:
        today = today or date.today()
        self.time_frame: TimeFrame = "month"
        self.view: View = "reports"
        self._year: int | None = today.year
        self._month: int | None = today.month
        self._day: int | None = None
        self.show_open = True
        self.show_in_progress = True
        self.show_closed = True
        self._categories: set[str] = set()
        self._clamp_day()

    # -- time window -----------------------------------------------------

    @property
    def selected_year(self) -> int | None:
        return self._year

    @selected_year.setter
    def selected_year(self, year: int | None) -> None:
        if year is not None and not 1 <= year <= 9999:
            raise ValueError(f"Invalid year: {year}")
        self._year = year
        self._clamp_day()

    @property
    def selected_month(self) -> int | None:
        return self._month

    @selected_month.setter
    def selected_month(self, month: int | None) -> None:
        if month is not None and not 1 <= month <= 12:
            raise ValueError(f"Invalid month: {month}")
        self._month = month
        self._clamp_day()

    @property
    def selected_day(self) -> int | None:
        return self._day

    @selected_day.setter
    def selected_day(self, day: int | None) -> None:
        if day is not None:
            last = days_in_month(self._year, self._month) if self._month else 31
            if not 1 <= day <= last:
                raise ValueError(f"Day must be between 1 and {last}")
        self._day = day

    def set_time_frame(self, time_frame: str) -> None:
        if time_frame not in TIME_FRAMES:
            raise ValueError(f"Unknown time frame: {time_frame}")
        self.time_frame = time_frame  # type: ignore[assignment]

    def valid_days(self) -> list[int]:
        if self._month is None:
            return []
        return list(range(1, days_in_month(self._year, self._month) + 1))

    def _clamp_day(self) -> None:
        if self._month is None:
            return
        last = days_in_month(self._year, self._month)
        if self._day is None:
            self._day = 1
        elif self._day > last:
            self._day = last

    # -- categories ------------------------------------------------------

    @property
    def selected_categories(self) -> set[str]:
        return set(self._categories)

    @selected_categories.setter
    def selected_categories(self, categories) -> None:
        self._categories = {c for c in categories if c}

    @property
    def selected_category(self) -> str | None:
        """The single selected category, if exactly one is selected."""
        if len(self._categories) == 1:
            return next(iter(self._categories))
        return None

    def toggle_category(self, category: str) -> bool:
        """Add or remove ``category``; returns whether it is now selected."""
        if category in self._categories:
            self._categories.discard(category)
            return False
        self._categories.add(category)
        return True

    def clear_categories(self) -> None:
        self._categories.clear()

    # -- views -----------------------------------------------------------

    def switch_view(self, view: str) -> None:
        """Switching to categories shows every status again; switching to
        the time series drops the category selection."""
        if view == "categories":
            self.show_open = True
            self.show_in_progress = True
            self.show_closed = True
        elif view == "reports":
            self.clear_categories()
        else:
            raise ValueError(f"Unknown view: {view}")
        self.view = view  # type: ignore[assignment]

    def status_visible(self, bucket: str) -> bool:
        return {
            "open": self.show_open,
            "in_progress": self.show_in_progress,
            "closed": self.show_closed,
        }[bucket]

    def snapshot(self) -> dict:
        return {
            "time_frame": self.time_frame,
            "view": self.view,
            "selected_year": self._year,
            "selected_month": self._month,
            "selected_day": self._day,
            "show_open": self.show_open,
            "show_in_progress": self.show_in_progress,
            "show_closed": self.show_closed,
            "selected_categories": sorted(self._categories),
            "selected_category": self.selected_category,
            "days_in_month": self.valid_days(),
        }


class FilterSessions:
    """Filter states keyed by session id. Never persisted.

    Reads never register a session; an unknown id sees a fresh default
    state. Stored states are replaced, never changed in place, and the
    least recently written sessions are dropped past ``max_sessions``.
    """

    def __init__(self, max_sessions: int = 1000) -> None:
        self.max_sessions = max_sessions
        self._states: OrderedDict[str, FilterState] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._states

    def get(self, session_id: str) -> FilterState:
        """Current state for reading; do not mutate the result."""
        with self._lock:
            state = self._states.get(session_id)
        return state if state is not None else FilterState()

    def update(self, session_id: str, change: Callable[[FilterState], object]) -> FilterState:
        """Apply ``change`` to a copy of the session's state and store it.

        If ``change`` raises, the stored state is left as it was.
        """
        with self._lock:
            current = self._states.get(session_id)
            state = copy.deepcopy(current) if current is not None else FilterState()
            change(state)
            self._store(session_id, state)
            return state

    def reset(self, session_id: str) -> FilterState:
        with self._lock:
            state = FilterState()
            self._store(session_id, state)
            return state

    def _store(self, session_id: str, state: FilterState) -> None:
        self._states[session_id] = state
        self._states.move_to_end(session_id)
        while len(self._states) > self.max_sessions:
            self._states.popitem(last=False)
