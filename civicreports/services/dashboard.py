"""Everything the dashboard shows for one filter state, in one pass."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone

from civicreports.schemas.activity import Activity
from civicreports.schemas.report import Report
from civicreports.services.activity_log import with_relative_time
from civicreports.services.aggregation import (
    available_years,
    bucket_by_time_frame,
    by_category,
    filter_reports,
    local_time,
    location_hotspots,
    report_stats,
    select_categories,
)
from civicreports.services.filter_state import FilterState


def build_dashboard(
    reports: list[Report],
    state: FilterState,
    activities: list[Activity],
    now: datetime | None = None,
    tz: str = "UTC",
    top_n: int = 5,
) -> dict:
    """Stats, charts, hotspots and recent activity for ``state``.

    The time series honours the category selection; the category chart
    always covers every report so a selected slice can be deselected.
    """
    now = now or datetime.now(timezone.utc)
    today = local_time(now, tz).date()
    time_series = bucket_by_time_frame(select_categories(reports, state.selected_categories), state, tz)
    return {
        "filters": state.snapshot(),
        "stats": report_stats(reports, now),
        "time_series": [b.to_dict() for b in time_series],
        "categories": [asdict(c) for c in by_category(reports)],
        "hotspots": [asdict(h) for h in location_hotspots(filter_reports(reports, state, tz), top_n)],
        "recent_activities": with_relative_time(activities, now),
        "available_years": available_years(reports, today, tz),
    }
