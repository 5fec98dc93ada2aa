"""Dashboard API: the data behind the charts, cards and activity feed."""

from fastapi import APIRouter, Depends, HTTPException, status

from civicreports.core.config import settings
from civicreports.core.deps import get_activity_log, get_filter_sessions, get_report_store
from civicreports.schemas.dashboard import DashboardResponse
from civicreports.services.activity_log import ActivityLog
from civicreports.services.dashboard import build_dashboard
from civicreports.services.db_report_store import StoreUnavailableError
from civicreports.services.filter_state import FilterSessions
from civicreports.services.report_store import ReportStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    session_id: str = "default",
    store: ReportStore = Depends(get_report_store),
    log: ActivityLog = Depends(get_activity_log),
    sessions: FilterSessions = Depends(get_filter_sessions),
):
    """Recomputed from the current reports on every call."""
    try:
        reports = store.list()
    except StoreUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return build_dashboard(
        reports,
        sessions.get(session_id),
        log.recent(settings.recent_activity_limit),
        tz=settings.report_timezone,
        top_n=settings.hotspot_top_n,
    )
