"""Migration of legacy report records into the canonical shape."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone

from civicreports.core.vocabulary import parse_priority, status_from
from civicreports.schemas.report import LegacyReportIn, Location, Report, normalize_assignee, normalize_tags
from civicreports.services.geo_service import parse_location

logger = logging.getLogger(__name__)


def _legacy_id(value: int | str | None) -> int | None:
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _aware(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def migrate_record(
    record: LegacyReportIn,
    vocabulary: str,
    fallback_id: int,
    now: datetime | None = None,
) -> Report:
    """Convert one legacy record; raises ``ValueError`` for unknown labels."""
    location = record.location
    if not isinstance(location, Location):
        location = parse_location(location)
    created = record.created_at or record.date or now or datetime.now(timezone.utc)
    legacy_id = _legacy_id(record.id)
    return Report(
        id=fallback_id if legacy_id is None else legacy_id,
        title=record.title,
        description=record.description or "",
        category=record.category,
        status=status_from(vocabulary, record.status),
        priority=parse_priority(record.priority),
        location=location,
        assigned_to=normalize_assignee(record.assigned_to),
        tags=normalize_tags(record.tags),
        created_at=_aware(created),
    )


def migrate_records(
    records: Iterable[LegacyReportIn],
    vocabulary: str,
    now: datetime | None = None,
) -> list[Report]:
    """Convert a batch; records without a numeric id are numbered after the rest."""
    records = list(records)
    taken = {i for i in (_legacy_id(r.id) for r in records) if i is not None}
    next_id = max(taken, default=0) + 1
    migrated = []
    for record in records:
        fallback = next_id
        if _legacy_id(record.id) is None:
            next_id += 1
        migrated.append(migrate_record(record, vocabulary, fallback, now))
    logger.info("Migrated %s %s report(s)", len(migrated), vocabulary)
    return migrated
