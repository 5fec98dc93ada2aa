"""Dashboard aggregations over a list of reports.

All functions are pure: they take reports (and a filter state) and return
new values without touching either.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import asdict, dataclass
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from civicreports.core.vocabulary import BUCKET_CLOSED, BUCKET_IN_PROGRESS, BUCKET_OPEN, ReportStatus, bucket_key
from civicreports.schemas.report import Report
from civicreports.services.filter_state import FilterState, days_in_month

logger = logging.getLogger(__name__)

MONTH_ABBR = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
WEEKDAY_ABBR = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


@dataclass
class TimeBucket:
    """Open / in progress / closed counts for one slot of a time series."""

    name: str
    open: int = 0
    in_progress: int = 0
    closed: int = 0

    @property
    def total(self) -> int:
        return self.open + self.in_progress + self.closed

    def add(self, status: ReportStatus) -> None:
        key = bucket_key(status)
        if key == BUCKET_OPEN:
            self.open += 1
        elif key == BUCKET_IN_PROGRESS:
            self.in_progress += 1
        else:
            self.closed += 1

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class CategoryCount:
    name: str
    value: int


@dataclass
class Hotspot:
    name: str
    count: int


def local_time(moment: datetime, tz: str = "UTC") -> datetime:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(ZoneInfo(tz))


def in_time_window(report: Report, state: FilterState, tz: str = "UTC") -> bool:
    """Whether the report falls in the selected year / month / day.

    The month narrows the window for the month, week and day views; the
    day only narrows the day view. The year view ignores both.
    """
    created = local_time(report.created_at, tz)
    if state.selected_year is not None and created.year != state.selected_year:
        return False
    if state.time_frame == "year":
        return True
    if state.selected_month is not None and created.month != state.selected_month:
        return False
    if state.time_frame == "day" and state.selected_day is not None:
        return created.day == state.selected_day
    return True


def _skeleton(state: FilterState) -> list[TimeBucket]:
    if state.time_frame == "year":
        names = MONTH_ABBR
    elif state.time_frame == "month":
        if state.selected_month is None:
            count = 31
        else:
            count = days_in_month(state.selected_year, state.selected_month)
        names = [str(d) for d in range(1, count + 1)]
    elif state.time_frame == "week":
        names = WEEKDAY_ABBR
    else:
        names = [f"{h}:00" for h in range(24)]
    return [TimeBucket(name=n) for n in names]


def _bucket_index(created: datetime, time_frame: str) -> int:
    if time_frame == "year":
        return created.month - 1
    if time_frame == "month":
        return created.day - 1
    if time_frame == "week":
        # weekday() is Monday-based, buckets start on Sunday
        return (created.weekday() + 1) % 7
    return created.hour


def bucket_by_time_frame(
    reports: list[Report],
    state: FilterState,
    tz: str = "UTC",
) -> list[TimeBucket]:
    """Time series for the selected granularity.

    The skeleton is built before any report is looked at, so empty slots
    are present with zero counts and the result always has the same length
    for a given window: 12, days in month, 7 or 24.
    """
    buckets = _skeleton(state)
    matched = 0
    for report in reports:
        if not in_time_window(report, state, tz):
            continue
        idx = _bucket_index(local_time(report.created_at, tz), state.time_frame)
        if idx < len(buckets):
            buckets[idx].add(report.status)
            matched += 1
    logger.debug(
        "Time series %s: %s of %s reports (year=%s month=%s day=%s)",
        state.time_frame, matched, len(reports),
        state.selected_year, state.selected_month, state.selected_day,
    )
    return buckets


def by_category(reports: list[Report]) -> list[CategoryCount]:
    """Report count per category label, largest first."""
    counts = Counter(r.category for r in reports)
    return [
        CategoryCount(name=name, value=value)
        for name, value in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    ]


def location_hotspots(reports: list[Report], top_n: int = 5) -> list[Hotspot]:
    """Most reported locations, by location name."""
    counts = Counter(r.location.name for r in reports)
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return [Hotspot(name=name, count=count) for name, count in ranked[: max(top_n, 0)]]


def filter_reports(reports: list[Report], state: FilterState, tz: str = "UTC") -> list[Report]:
    """Reports currently shown on the map for this filter state.

    In the categories view with a selection, only the category matters.
    Otherwise the time window and status visibility flags apply.
    """
    if state.view == "categories" and state.selected_categories:
        selected = state.selected_categories
        return [r for r in reports if r.category in selected]
    return [
        r
        for r in reports
        if in_time_window(r, state, tz) and state.status_visible(bucket_key(r.status))
    ]


def select_categories(reports: list[Report], categories: set[str]) -> list[Report]:
    if not categories:
        return list(reports)
    return [r for r in reports if r.category in categories]


def report_stats(reports: list[Report], now: datetime | None = None) -> dict:
    """Headline numbers for the dashboard cards."""
    now = now or datetime.now(timezone.utc)
    buckets = Counter(bucket_key(r.status) for r in reports)
    open_ages = [
        (now - local_time(r.created_at)).total_seconds() / 86400
        for r in reports
        if bucket_key(r.status) != BUCKET_CLOSED
    ]
    average = round(sum(open_ages) / len(open_ages), 1) if open_ages else None
    return {
        "total_reports": len(reports),
        "open_issues": buckets[BUCKET_OPEN],
        "in_progress_issues": buckets[BUCKET_IN_PROGRESS],
        "closed_issues": buckets[BUCKET_CLOSED],
        "average_open_age_days": average,
    }


def available_years(reports: list[Report], today: date | None = None, tz: str = "UTC") -> list[int]:
    """Years that have reports; the current year is added when none is in the past."""
    today = today or date.today()
    years = sorted({local_time(r.created_at, tz).year for r in reports})
    if not years or min(years) > today.year:
        years.insert(0, today.year)
    return years
