"""Report store backed by the relational database.

The table speaks the relational status vocabulary; everything above this
module sees canonical statuses only.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from civicreports.core.events import EventBus
from civicreports.core.vocabulary import ReportPriority, status_from_relational, status_to_relational
from civicreports.models.report import ReportRow
from civicreports.schemas.report import Location, Report, ReportCreate
from civicreports.services.activity_log import ActivityLog
from civicreports.services.report_store import ReportStore

logger = logging.getLogger(__name__)


class StoreUnavailableError(RuntimeError):
    """The backing database could not complete the call."""


def _aware(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes; they were written as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def row_to_report(row: ReportRow) -> Report:
    return Report(
        id=row.id,
        title=row.title,
        description=row.description or "",
        category=row.category,
        status=status_from_relational(row.status),
        priority=ReportPriority(row.priority),
        location=Location(name=row.location_name, lat=row.latitude, lng=row.longitude),
        assigned_to=row.assigned_to,
        tags=list(row.tags or []),
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def apply_report(row: ReportRow, report: Report) -> None:
    """Copy mutable report fields onto a row."""
    row.title = report.title
    row.description = report.description
    row.category = report.category
    row.status = status_to_relational(report.status)
    row.priority = report.priority.value
    row.location_name = report.location.name
    row.latitude = report.location.lat
    row.longitude = report.location.lng
    row.assigned_to = report.assigned_to
    row.tags = list(report.tags)
    row.updated_at = report.updated_at


class DatabaseReportStore(ReportStore):
    def __init__(
        self,
        session_factory: sessionmaker,
        activity_log: ActivityLog,
        bus: EventBus | None = None,
        enforce_transitions: bool = False,
    ) -> None:
        super().__init__(activity_log, bus, enforce_transitions)
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Report store call failed")
            raise StoreUnavailableError("Report store is unavailable") from exc
        finally:
            db.close()

    def list(self) -> list[Report]:
        with self._session() as db:
            rows = db.execute(
                select(ReportRow).order_by(ReportRow.created_at.desc(), ReportRow.id.desc())
            ).scalars().all()
            return [row_to_report(r) for r in rows]

    def get(self, report_id: int) -> Report | None:
        with self._session() as db:
            row = db.get(ReportRow, report_id)
            return row_to_report(row) if row else None

    def create(self, data: ReportCreate) -> Report:
        with self._session() as db:
            row = ReportRow(created_at=datetime.now(timezone.utc))
            apply_report(row, Report(id=0, created_at=row.created_at, **data.model_dump()))
            db.add(row)
            db.commit()
            db.refresh(row)
            report = row_to_report(row)
        logger.info("Report created: id=%s category=%s", report.id, report.category)
        self._record_created(report)
        return report

    def update(self, report_id: int, patch: dict[str, Any]) -> Report | None:
        with self._session() as db:
            row = db.get(ReportRow, report_id)
            if not row:
                return None
            before = row_to_report(row)
            after = self._merge(before, patch)
            apply_report(row, after)
            db.commit()
        self._record_changes(before, after)
        return after

    def delete(self, report_id: int) -> bool:
        with self._session() as db:
            row = db.get(ReportRow, report_id)
            if not row:
                return False
            removed = row_to_report(row)
            db.delete(row)
            db.commit()
        logger.info("Report deleted: id=%s", report_id)
        self._record_deleted(removed)
        return True

    def load(self, reports: Iterable[Report]) -> int:
        loaded = 0
        with self._session() as db:
            for report in reports:
                if db.get(ReportRow, report.id) is not None:
                    raise ValueError(f"Duplicate report id: {report.id}")
                row = ReportRow(id=report.id, created_at=report.created_at)
                apply_report(row, report)
                db.add(row)
                db.flush()
                loaded += 1
            db.commit()
        return loaded

    def import_reports(self, reports: Iterable[Report]) -> list[Report]:
        with self._session() as db:
            rows = []
            for report in reports:
                row = ReportRow(created_at=report.created_at)
                apply_report(row, report)
                db.add(row)
                rows.append(row)
            db.commit()
            imported = []
            for row in rows:
                db.refresh(row)
                imported.append(row_to_report(row))
        for report in imported:
            self._record_created(report, title="Report imported")
        return imported
