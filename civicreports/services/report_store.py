"""Report store contract and the in-memory implementation."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from civicreports.core.events import ACTIVITY_CREATED, REPORT_CREATED, REPORT_DELETED, REPORT_UPDATED, EventBus
from civicreports.core.vocabulary import STATUS_LABELS, ReportStatus, check_transition
from civicreports.schemas.activity import Activity, ActivityType
from civicreports.schemas.report import Report, ReportCreate, normalize_assignee, normalize_tags
from civicreports.services.activity_log import ActivityLog

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = {"id", "created_at", "updated_at"}


class ReportStore(ABC):
    """Shared behaviour for report stores.

    Subclasses own persistence; this class owns merging patches, deciding
    which activities a change produces and publishing events.
    """

    def __init__(
        self,
        activity_log: ActivityLog,
        bus: EventBus | None = None,
        enforce_transitions: bool = False,
    ) -> None:
        self.activity_log = activity_log
        self.bus = bus or EventBus()
        self.enforce_transitions = enforce_transitions

    @abstractmethod
    def list(self) -> list[Report]:
        """All reports, newest first, as copies."""

    @abstractmethod
    def get(self, report_id: int) -> Report | None:
        ...

    @abstractmethod
    def create(self, data: ReportCreate) -> Report:
        ...

    @abstractmethod
    def update(self, report_id: int, patch: dict[str, Any]) -> Report | None:
        ...

    @abstractmethod
    def delete(self, report_id: int) -> bool:
        ...

    @abstractmethod
    def load(self, reports: Iterable[Report]) -> int:
        """Bulk-load existing reports as they are, without logging."""

    @abstractmethod
    def import_reports(self, reports: Iterable[Report]) -> list[Report]:
        """Add migrated reports under fresh ids, keeping their timestamps."""

    def assigned_to(self, assignee: str) -> list[Report]:
        name = normalize_assignee(assignee)
        if name is None:
            return [r for r in self.list() if r.assigned_to is None]
        return [r for r in self.list() if r.assigned_to == name]

    def _merge(self, current: Report, patch: dict[str, Any]) -> Report:
        patch = {k: v for k, v in patch.items() if k not in IMMUTABLE_FIELDS}
        if "assigned_to" in patch:
            patch["assigned_to"] = normalize_assignee(patch["assigned_to"])
        if "tags" in patch:
            patch["tags"] = normalize_tags(patch["tags"])
        merged = current.model_dump()
        merged.update(patch)
        updated = Report.model_validate(merged)

        if self.enforce_transitions:
            check_transition(current.status, updated.status)

        if updated.model_dump(exclude={"updated_at"}) != current.model_dump(exclude={"updated_at"}):
            updated.updated_at = datetime.now(timezone.utc)
        return updated

    def _log(self, type: ActivityType, title: str, description: str, report_id: int) -> Activity:
        activity = self.activity_log.append(
            type=type,
            title=title,
            description=description,
            related_report_id=report_id,
        )
        self.bus.publish(ACTIVITY_CREATED, activity.model_dump(mode="json"))
        return activity

    def _record_created(self, report: Report, title: str = "New report submitted") -> None:
        self._log(
            ActivityType.REPORT_CREATED,
            title,
            f"{report.title} at {report.location.name}",
            report.id,
        )
        self.bus.publish(REPORT_CREATED, report.model_dump(mode="json"))

    def _record_changes(self, before: Report, after: Report) -> list[Activity]:
        """One activity per tracked field whose value actually changed."""
        logged: list[Activity] = []
        if after.status != before.status:
            if after.status == ReportStatus.RESOLVED:
                logged.append(self._log(
                    ActivityType.REPORT_RESOLVED,
                    "Report resolved",
                    f"{after.title} at {after.location.name}",
                    after.id,
                ))
            else:
                logged.append(self._log(
                    ActivityType.REPORT_UPDATED,
                    "Report status updated",
                    f"{after.title} marked as '{STATUS_LABELS[after.status]}'",
                    after.id,
                ))
        if after.assigned_to != before.assigned_to:
            if after.assigned_to:
                logged.append(self._log(
                    ActivityType.REPORT_ASSIGNED,
                    "Report assigned",
                    f"{after.title} assigned to {after.assigned_to}",
                    after.id,
                ))
            else:
                logged.append(self._log(
                    ActivityType.REPORT_UNASSIGNED,
                    "Report unassigned",
                    f"{after.title} is no longer assigned to {before.assigned_to}",
                    after.id,
                ))
        if after.priority != before.priority:
            logged.append(self._log(
                ActivityType.PRIORITY_CHANGED,
                "Priority changed",
                f"{after.title} priority changed to {after.priority.value}",
                after.id,
            ))
        if after.category != before.category:
            logged.append(self._log(
                ActivityType.CATEGORY_CHANGED,
                "Category changed",
                f"{after.title} category changed to {after.category}",
                after.id,
            ))
        if after.location != before.location:
            logged.append(self._log(
                ActivityType.LOCATION_CHANGED,
                "Location updated",
                f"{after.title} location changed to {after.location.name}",
                after.id,
            ))
        if after != before:
            self.bus.publish(REPORT_UPDATED, after.model_dump(mode="json"))
        return logged

    def _record_deleted(self, report: Report) -> None:
        self._log(
            ActivityType.REPORT_DELETED,
            "Report deleted",
            f"{report.title} was removed",
            report.id,
        )
        self.bus.publish(REPORT_DELETED, {"id": report.id})


class InMemoryReportStore(ReportStore):
    """Report store backed by a list; the dashboard's mock data source."""

    def __init__(
        self,
        activity_log: ActivityLog,
        bus: EventBus | None = None,
        enforce_transitions: bool = False,
    ) -> None:
        super().__init__(activity_log, bus, enforce_transitions)
        self._reports: list[Report] = []
        self._lock = threading.RLock()

    def _next_id(self) -> int:
        return max((r.id for r in self._reports), default=0) + 1

    def _index(self, report_id: int) -> int | None:
        for i, r in enumerate(self._reports):
            if r.id == report_id:
                return i
        return None

    def list(self) -> list[Report]:
        with self._lock:
            return [r.model_copy(deep=True) for r in self._reports]

    def get(self, report_id: int) -> Report | None:
        with self._lock:
            idx = self._index(report_id)
            if idx is None:
                return None
            return self._reports[idx].model_copy(deep=True)

    def create(self, data: ReportCreate) -> Report:
        with self._lock:
            report = Report(
                id=self._next_id(),
                created_at=datetime.now(timezone.utc),
                **data.model_dump(),
            )
            self._reports.insert(0, report)
        logger.info("Report created: id=%s category=%s", report.id, report.category)
        self._record_created(report)
        return report.model_copy(deep=True)

    def update(self, report_id: int, patch: dict[str, Any]) -> Report | None:
        with self._lock:
            idx = self._index(report_id)
            if idx is None:
                return None
            before = self._reports[idx]
            after = self._merge(before, patch)
            self._reports[idx] = after
        self._record_changes(before, after)
        return after.model_copy(deep=True)

    def delete(self, report_id: int) -> bool:
        with self._lock:
            idx = self._index(report_id)
            if idx is None:
                return False
            removed = self._reports.pop(idx)
        logger.info("Report deleted: id=%s", report_id)
        self._record_deleted(removed)
        return True

    def load(self, reports: Iterable[Report]) -> int:
        with self._lock:
            existing = {r.id for r in self._reports}
            loaded = 0
            for report in reports:
                if report.id in existing:
                    raise ValueError(f"Duplicate report id: {report.id}")
                existing.add(report.id)
                self._reports.append(report.model_copy(deep=True))
                loaded += 1
            self._reports.sort(key=lambda r: r.created_at, reverse=True)
        return loaded

    def import_reports(self, reports: Iterable[Report]) -> list[Report]:
        imported: list[Report] = []
        with self._lock:
            for report in reports:
                fresh = report.model_copy(update={"id": self._next_id()}, deep=True)
                self._reports.insert(0, fresh)
                imported.append(fresh)
        for report in imported:
            self._record_created(report, title="Report imported")
        return [r.model_copy(deep=True) for r in imported]
