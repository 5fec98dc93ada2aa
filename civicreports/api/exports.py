"""CSV export API."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from civicreports.core.config import settings
from civicreports.core.deps import get_filter_sessions, get_report_store
from civicreports.core.vocabulary import ReportStatus
from civicreports.services.aggregation import (
    bucket_by_time_frame,
    by_category,
    filter_reports,
    local_time,
    select_categories,
)
from civicreports.services.csv_export import (
    CsvExport,
    NothingToExport,
    export_categories,
    export_locations,
    export_reports,
    export_time_series,
)
from civicreports.services.db_report_store import StoreUnavailableError
from civicreports.services.filter_state import FilterSessions
from civicreports.services.report_store import ReportStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/exports", tags=["exports"])


def _today() -> date:
    return local_time(datetime.now(timezone.utc), settings.report_timezone).date()


def _reports(store: ReportStore):
    try:
        return store.list()
    except StoreUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


def _download(build) -> Response:
    """Run an export and wrap it as a file download."""
    try:
        export: CsvExport = build()
    except NothingToExport:
        logger.info("Export skipped: nothing to export")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Nothing to export")
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@router.get("/time-series.csv")
def time_series_csv(
    session_id: str = "default",
    store: ReportStore = Depends(get_report_store),
    sessions: FilterSessions = Depends(get_filter_sessions),
):
    """The trend chart as shown: one row per time slot."""
    state = sessions.get(session_id)
    reports = select_categories(_reports(store), state.selected_categories)
    buckets = bucket_by_time_frame(reports, state, settings.report_timezone)
    return _download(lambda: export_time_series(buckets, state, _today()))


@router.get("/categories.csv")
def categories_csv(
    session_id: str = "default",
    store: ReportStore = Depends(get_report_store),
    sessions: FilterSessions = Depends(get_filter_sessions),
):
    """Category distribution, limited to the selected categories if any."""
    state = sessions.get(session_id)
    counts = by_category(_reports(store))
    return _download(lambda: export_categories(counts, state.selected_categories, _today()))


@router.get("/locations.csv")
def locations_csv(
    session_id: str = "default",
    store: ReportStore = Depends(get_report_store),
    sessions: FilterSessions = Depends(get_filter_sessions),
):
    """Reports currently on the map."""
    state = sessions.get(session_id)
    reports = filter_reports(_reports(store), state, settings.report_timezone)
    return _download(lambda: export_locations(reports, state.view, _today()))


@router.get("/reports.csv")
def reports_csv(
    status_filter: ReportStatus | None = Query(default=None, alias="status"),
    category: list[str] = Query(default=[]),
    store: ReportStore = Depends(get_report_store),
):
    """The admin report table, optionally narrowed by status and category."""
    reports = select_categories(_reports(store), set(category))
    if status_filter is not None:
        reports = [r for r in reports if r.status == status_filter]
    return _download(lambda: export_reports(reports, _today(), status_filter, category))
