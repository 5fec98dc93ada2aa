"""Activity feed API."""

from fastapi import APIRouter, Depends, Query

from civicreports.core.deps import get_activity_log
from civicreports.schemas.activity import ActivityResponse
from civicreports.services.activity_log import ActivityLog, with_relative_time

router = APIRouter(prefix="/activities", tags=["activities"])


@router.get("", response_model=list[ActivityResponse])
def list_activities(
    limit: int | None = Query(default=None, ge=1),
    report_id: int | None = None,
    user_id: str | None = None,
    category_id: str | None = None,
    log: ActivityLog = Depends(get_activity_log),
):
    """Newest first. ``time`` is computed at read time."""
    if report_id is not None:
        activities = log.for_report(report_id)
    elif user_id is not None:
        activities = log.for_user(user_id)
    elif category_id is not None:
        activities = log.for_category(category_id)
    else:
        activities = log.all()
    if limit is not None:
        activities = activities[:limit]
    return with_relative_time(activities)
