"""Filter state and dashboard schemas."""

from typing import Literal

from pydantic import BaseModel, Field

from civicreports.schemas.activity import ActivityResponse


class FilterStateResponse(BaseModel):
    time_frame: Literal["day", "week", "month", "year"]
    view: Literal["reports", "categories"]
    selected_year: int | None
    selected_month: int | None = Field(description="1 = January")
    selected_day: int | None
    show_open: bool
    show_in_progress: bool
    show_closed: bool
    selected_categories: list[str]
    selected_category: str | None
    days_in_month: list[int]


class FilterUpdate(BaseModel):
    time_frame: Literal["day", "week", "month", "year"] | None = None
    selected_year: int | None = Field(default=None, ge=1, le=9999)
    selected_month: int | None = Field(default=None, ge=1, le=12)
    selected_day: int | None = Field(default=None, ge=1, le=31)
    show_open: bool | None = None
    show_in_progress: bool | None = None
    show_closed: bool | None = None
    selected_categories: list[str] | None = None


class ViewSwitch(BaseModel):
    view: Literal["reports", "categories"]


class TimeBucketResponse(BaseModel):
    name: str
    open: int
    in_progress: int
    closed: int


class CategoryCountResponse(BaseModel):
    name: str
    value: int


class HotspotResponse(BaseModel):
    name: str
    count: int


class StatsResponse(BaseModel):
    total_reports: int
    open_issues: int
    in_progress_issues: int
    closed_issues: int
    average_open_age_days: float | None


class DashboardResponse(BaseModel):
    filters: FilterStateResponse
    stats: StatsResponse
    time_series: list[TimeBucketResponse]
    categories: list[CategoryCountResponse]
    hotspots: list[HotspotResponse]
    recent_activities: list[ActivityResponse]
    available_years: list[int]
