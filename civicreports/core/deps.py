"""FastAPI dependencies: the process-wide stores."""

from __future__ import annotations

import logging
from functools import lru_cache

from civicreports.core.config import settings
from civicreports.core.events import EventBus
from civicreports.services.activity_log import ActivityLog
from civicreports.services.admin_service import AdminCatalog
from civicreports.services.filter_state import FilterSessions
from civicreports.services.report_store import InMemoryReportStore, ReportStore
from civicreports.services.seed import seed_catalog, seed_reports

logger = logging.getLogger(__name__)


@lru_cache
def get_event_bus() -> EventBus:
    return EventBus()


@lru_cache
def get_activity_log() -> ActivityLog:
    return ActivityLog(limit=settings.activity_log_limit)


@lru_cache
def get_report_store() -> ReportStore:
    """Report store selected by ``report_backend``, seeded on first use."""
    if settings.report_backend == "database":
        from civicreports.db.session import SessionLocal, init_db
        from civicreports.services.db_report_store import DatabaseReportStore

        init_db()
        store: ReportStore = DatabaseReportStore(
            SessionLocal,
            get_activity_log(),
            get_event_bus(),
            enforce_transitions=settings.enforce_status_transitions,
        )
    else:
        store = InMemoryReportStore(
            get_activity_log(),
            get_event_bus(),
            enforce_transitions=settings.enforce_status_transitions,
        )
    logger.info("Using %s report store", settings.report_backend)
    if settings.seed_demo_data:
        seed_reports(store)
    return store


@lru_cache
def get_admin_catalog() -> AdminCatalog:
    catalog = AdminCatalog(get_activity_log())
    if settings.seed_demo_data:
        seed_catalog(catalog)
    return catalog


@lru_cache
def get_filter_sessions() -> FilterSessions:
    return FilterSessions(max_sessions=settings.filter_session_limit)
