"""Reports API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from civicreports.core.deps import get_activity_log, get_report_store
from civicreports.core.vocabulary import VOCABULARIES, IllegalTransitionError, ReportStatus, UnknownStatusError
from civicreports.schemas.activity import ActivityResponse
from civicreports.schemas.report import LegacyReportIn, NearbyReport, Report, ReportCreate, ReportUpdate
from civicreports.services.activity_log import ActivityLog, with_relative_time
from civicreports.services.db_report_store import StoreUnavailableError
from civicreports.services.geo_service import reports_near
from civicreports.services.legacy_import import migrate_records
from civicreports.services.report_store import ReportStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


def _unavailable(e: StoreUnavailableError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


@router.get("", response_model=list[Report])
def list_reports(
    status_filter: ReportStatus | None = Query(default=None, alias="status"),
    category: str | None = None,
    assigned_to: str | None = None,
    store: ReportStore = Depends(get_report_store),
):
    """All reports, newest first, optionally filtered."""
    try:
        reports = store.assigned_to(assigned_to) if assigned_to is not None else store.list()
    except StoreUnavailableError as e:
        raise _unavailable(e)
    if status_filter is not None:
        reports = [r for r in reports if r.status == status_filter]
    if category:
        reports = [r for r in reports if r.category == category]
    return reports


@router.get("/nearby", response_model=list[NearbyReport])
def nearby_reports(
    lat: float = Query(ge=-90, le=90),
    lng: float = Query(ge=-180, le=180),
    radius_km: float | None = Query(default=None, gt=0),
    limit: int = Query(default=50, ge=1, le=500),
    store: ReportStore = Depends(get_report_store),
):
    """Reports ordered by distance from a point."""
    try:
        reports = store.list()
    except StoreUnavailableError as e:
        raise _unavailable(e)
    ranked = reports_near(reports, lat, lng, radius_km=radius_km, limit=limit)
    return [NearbyReport(report=r.report, distance_km=r.distance_km) for r in ranked]


@router.post("", response_model=Report, status_code=status.HTTP_201_CREATED)
def create_report(data: ReportCreate, store: ReportStore = Depends(get_report_store)):
    try:
        return store.create(data)
    except StoreUnavailableError as e:
        raise _unavailable(e)


@router.post("/import", response_model=list[Report], status_code=status.HTTP_201_CREATED)
def import_reports(
    records: list[LegacyReportIn],
    vocabulary: str = Query(default="mock"),
    store: ReportStore = Depends(get_report_store),
):
    """Migrate records in a legacy shape and add them under fresh ids."""
    if vocabulary not in VOCABULARIES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown vocabulary: {vocabulary}",
        )
    try:
        migrated = migrate_records(records, vocabulary)
    except UnknownStatusError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    try:
        return store.import_reports(migrated)
    except StoreUnavailableError as e:
        raise _unavailable(e)


@router.get("/{report_id}", response_model=Report)
def get_report(report_id: int, store: ReportStore = Depends(get_report_store)):
    try:
        report = store.get(report_id)
    except StoreUnavailableError as e:
        raise _unavailable(e)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
    return report


@router.patch("/{report_id}", response_model=Report)
def update_report(
    report_id: int,
    data: ReportUpdate,
    store: ReportStore = Depends(get_report_store),
):
    """Apply the fields sent; unchanged fields produce no activity."""
    try:
        report = store.update(report_id, data.patch())
    except IllegalTransitionError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreUnavailableError as e:
        raise _unavailable(e)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
    return report


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_report(report_id: int, store: ReportStore = Depends(get_report_store)):
    try:
        removed = store.delete(report_id)
    except StoreUnavailableError as e:
        raise _unavailable(e)
    if not removed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{report_id}/activities", response_model=list[ActivityResponse])
def report_activities(report_id: int, log: ActivityLog = Depends(get_activity_log)):
    """Change history of one report, newest first."""
    return with_relative_time(log.for_report(report_id))
