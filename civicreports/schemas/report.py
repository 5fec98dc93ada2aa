"""Report schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from civicreports.core.vocabulary import ReportPriority, ReportStatus

UNASSIGNED_LABELS = {"", "unassigned"}


def normalize_assignee(value: str | None) -> str | None:
    """``None``, blank and ``Unassigned`` all mean nobody is assigned."""
    if value is None:
        return None
    value = value.strip()
    if value.lower() in UNASSIGNED_LABELS:
        return None
    return value


def normalize_tags(tags: list[str] | None) -> list[str]:
    """Lowercase, strip and de-duplicate tags, keeping first-seen order."""
    seen: list[str] = []
    for tag in tags or []:
        clean = tag.strip().lower()
        if clean and clean not in seen:
            seen.append(clean)
    return seen


class Location(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class ReportCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    category: str = Field(min_length=1, max_length=100)
    status: ReportStatus = ReportStatus.OPEN
    priority: ReportPriority = ReportPriority.MEDIUM
    location: Location
    assigned_to: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("assigned_to")
    @classmethod
    def validate_assignee(cls, v: str | None) -> str | None:
        return normalize_assignee(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return normalize_tags(v)


class ReportUpdate(BaseModel):
    """Partial update; only fields the client sent are applied."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    category: str | None = Field(default=None, min_length=1, max_length=100)
    status: ReportStatus | None = None
    priority: ReportPriority | None = None
    location: Location | None = None
    assigned_to: str | None = None
    tags: list[str] | None = None

    @field_validator("assigned_to")
    @classmethod
    def validate_assignee(cls, v: str | None) -> str | None:
        return normalize_assignee(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        return normalize_tags(v)

    def patch(self) -> dict[str, Any]:
        """Fields explicitly set by the client, ``None`` only for the assignee."""
        data = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if value is None and name != "assigned_to":
                continue
            data[name] = value
        return data


class Report(BaseModel):
    id: int
    title: str
    description: str = ""
    category: str
    status: ReportStatus
    priority: ReportPriority = ReportPriority.MEDIUM
    location: Location
    assigned_to: str | None = None
    tags: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class LegacyReportIn(BaseModel):
    """A report in one of the legacy shapes (mock store or geo store)."""

    id: int | str | None = None
    title: str = Field(min_length=1)
    description: str | None = ""
    category: str = Field(min_length=1)
    status: str
    priority: str | None = None
    location: str | Location
    assigned_to: str | None = Field(default=None, alias="assignedTo")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    date: datetime | None = None
    tags: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class NearbyReport(BaseModel):
    report: Report
    distance_km: float
