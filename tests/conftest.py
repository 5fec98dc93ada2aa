"""Pytest fixtures."""

from datetime import date, datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from civicreports.core.deps import (
    get_activity_log,
    get_admin_catalog,
    get_event_bus,
    get_filter_sessions,
    get_report_store,
)
from civicreports.core.events import EventBus
from civicreports.db.session import init_db, make_engine
from civicreports.main import app
from civicreports.schemas.report import Location, ReportCreate
from civicreports.services.activity_log import ActivityLog
from civicreports.services.admin_service import AdminCatalog
from civicreports.services.db_report_store import DatabaseReportStore
from civicreports.services.filter_state import FilterSessions, FilterState
from civicreports.services.report_store import InMemoryReportStore
from civicreports.services.seed import seed_catalog

NOW = datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc)


def make_report(**overrides) -> ReportCreate:
    """A valid report payload; override any field."""
    data = {
        "title": "Broken Street Light",
        "description": "Light out since Monday",
        "category": "Infrastructure",
        "location": Location(name="Av. Reforma 123", lat=19.4270, lng=-99.1677),
    }
    data.update(overrides)
    return ReportCreate(**data)


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def activity_log():
    return ActivityLog()


@pytest.fixture
def store(activity_log, bus):
    """Empty in-memory store."""
    return InMemoryReportStore(activity_log, bus)


@pytest.fixture
def db_store(tmp_path, activity_log, bus):
    """Relational store on a throwaway SQLite file."""
    engine = make_engine(f"sqlite:///{tmp_path / 'reports.db'}")
    init_db(engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield DatabaseReportStore(factory, activity_log, bus)
    engine.dispose()


@pytest.fixture
def catalog(activity_log):
    """Admin catalogue with the demo users, categories, zones and settings."""
    catalog = AdminCatalog(activity_log)
    seed_catalog(catalog, NOW)
    return catalog


@pytest.fixture
def filter_state():
    return FilterState(today=date(2024, 3, 20))


@pytest.fixture
def client(catalog, activity_log):
    """Test client with fresh stores; live events go through the app's bus."""
    app_store = InMemoryReportStore(activity_log, get_event_bus())
    sessions = FilterSessions()
    app.dependency_overrides[get_report_store] = lambda: app_store
    app.dependency_overrides[get_activity_log] = lambda: activity_log
    app.dependency_overrides[get_admin_catalog] = lambda: catalog
    app.dependency_overrides[get_filter_sessions] = lambda: sessions
    with TestClient(app) as c:
        c.store = app_store
        c.sessions = sessions
        yield c
    app.dependency_overrides.clear()
