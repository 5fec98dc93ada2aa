"""Activity log schemas."""

import enum
from datetime import datetime

from pydantic import BaseModel


class ActivityType(str, enum.Enum):
    REPORT_CREATED = "report_created"
    REPORT_UPDATED = "report_updated"
    REPORT_RESOLVED = "report_resolved"
    REPORT_ASSIGNED = "report_assigned"
    REPORT_UNASSIGNED = "report_unassigned"
    PRIORITY_CHANGED = "priority_changed"
    CATEGORY_CHANGED = "category_changed"
    LOCATION_CHANGED = "location_changed"
    REPORT_DELETED = "report_deleted"
    USER_CREATED = "user_created"
    USER_UPDATED = "user_updated"
    USER_DEACTIVATED = "user_deactivated"
    USER_DELETED = "user_deleted"
    CATEGORY_CREATED = "category_created"
    CATEGORY_UPDATED = "category_updated"
    CATEGORY_DELETED = "category_deleted"
    ZONE_CREATED = "zone_created"
    ZONE_UPDATED = "zone_updated"
    ZONE_DELETED = "zone_deleted"
    SETTING_UPDATED = "setting_updated"


class Activity(BaseModel):
    """Immutable log entry."""

    id: int
    type: ActivityType
    title: str
    description: str
    related_report_id: int | None = None
    related_item_id: str | None = None
    user_id: str | None = None
    user_name: str | None = None
    created_at: datetime

    model_config = {"frozen": True}


class ActivityResponse(Activity):
    time: str
