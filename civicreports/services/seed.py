"""Demo data loaded at startup when ``seed_demo_data`` is on."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from civicreports.schemas.admin import Category, SystemSetting, User, Zone
from civicreports.schemas.report import LegacyReportIn
from civicreports.services.admin_service import AdminCatalog
from civicreports.services.legacy_import import migrate_records
from civicreports.services.report_store import ReportStore

logger = logging.getLogger(__name__)

# Records in the mock store shape: title-case statuses, free-text locations
MOCK_REPORTS = [
    ("Broken Street Light", "Infrastructure", "Open", "Medium", "Av. Reforma 123", "Carlos Gutierrez", 0),
    ("Pothole on Main Street", "Road", "In Progress", "High", "Calle 16 de Septiembre", "Ana Mendoza", 2),
    ("Graffiti on Public Building", "Vandalism", "Open", "Low", "Parque Lincoln", "Unassigned", 3),
    ("Fallen Tree After Storm", "Environment", "Resolved", "High", "Bosque de Chapultepec", "Miguel Santos", 5),
    ("Broken Pedestrian Signal", "Infrastructure", "Resolved", "Medium", "Insurgentes Sur", "Laura Díaz", 10),
]

# Records in the geo store shape: lowercase workflow statuses, structured locations
GEO_REPORTS = [
    {
        "title": "Coastal Erosion Assessment",
        "description": "Annual assessment of coastline changes in the Pacific Northwest region.",
        "location": {"lat": 47.6062, "lng": -122.3321, "name": "Seattle, WA"},
        "date": "2025-03-15",
        "status": "approved",
        "category": "Environmental",
        "tags": ["coastal", "erosion", "annual"],
    },
    {
        "title": "Urban Development Impact",
        "description": "Analysis of urban sprawl and its environmental impact on local watersheds.",
        "location": {"lat": 37.7749, "lng": -122.4194, "name": "San Francisco, CA"},
        "date": "2025-02-28",
        "status": "submitted",
        "category": "Urban Planning",
        "tags": ["urban", "development", "watershed"],
    },
    {
        "title": "Forest Fire Risk Assessment",
        "description": "Quarterly evaluation of forest fire risks based on climate and vegetation data.",
        "location": {"lat": 39.5501, "lng": -105.7821, "name": "Colorado Mountains"},
        "date": "2025-04-01",
        "status": "draft",
        "category": "Disaster Management",
        "tags": ["forest", "fire", "risk", "climate"],
    },
    {
        "title": "Agricultural Soil Quality",
        "description": "Biannual analysis of soil quality and contamination levels in agricultural areas.",
        "location": {"lat": 41.8781, "lng": -93.0977, "name": "Central Iowa"},
        "date": "2025-01-15",
        "status": "approved",
        "category": "Agriculture",
        "tags": ["soil", "agriculture", "contamination"],
    },
]


def demo_reports(now: datetime):
    mock = [
        LegacyReportIn(
            id=i,
            title=title,
            category=category,
            status=status,
            priority=priority,
            location=location,
            assignedTo=assignee,
            createdAt=now - timedelta(days=days_ago),
        )
        for i, (title, category, status, priority, location, assignee, days_ago) in enumerate(MOCK_REPORTS, start=1)
    ]
    geo = [LegacyReportIn(id=len(mock) + i, **record) for i, record in enumerate(GEO_REPORTS, start=1)]
    return migrate_records(mock, "mock", now) + migrate_records(geo, "geo", now)


def demo_catalog(now: datetime) -> dict:
    users = [
        User(id="user-1", name="Admin Usuario", email="admin@example.com", role="admin",
             created_at=now - timedelta(days=120), last_login=now - timedelta(hours=2)),
        User(id="user-2", name="Supervisor Web", email="supervisor@example.com", role="supervisor",
             created_at=now - timedelta(days=30), last_login=now - timedelta(days=1)),
        User(id="user-3", name="Usuario Móvil", email="movil@example.com", role="mobile",
             mobile_user_type="technician", created_at=now - timedelta(days=15)),
        User(id="user-4", name="Usuario Inactivo", email="inactivo@example.com", role="mobile",
             active=False, mobile_user_type="citizen", created_at=now - timedelta(days=180)),
        User(id="user-5", name="Nuevo Usuario", email="nuevo@example.com", role="viewer",
             created_at=now - timedelta(hours=12)),
    ]
    category_rows = [
        ("Infrastructure", "Street lights, signals and public installations", "#FFD700", "lightbulb"),
        ("Road", "Potholes, pavements and road markings", "#FF6347", "road"),
        ("Vandalism", "Graffiti and damage to public property", "#9370DB", "spray-can"),
        ("Environment", "Trees, parks and green areas", "#32CD32", "tree"),
        ("Environmental", "Environmental assessments", "#00CED1", "leaf"),
        ("Urban Planning", "Urban development studies", "#4682B4", "building"),
        ("Disaster Management", "Risk and disaster assessments", "#DC143C", "flame"),
        ("Agriculture", "Soil and crop monitoring", "#8B4513", "sprout"),
    ]
    categories = [
        Category(id=f"category-{i}", name=name, description=desc, color=color, icon=icon,
                 created_at=now - timedelta(days=200 - i * 10))
        for i, (name, desc, color, icon) in enumerate(category_rows, start=1)
    ]
    zones = [
        Zone(id="zone-1", name="Centro", description="Historic centre", created_at=now - timedelta(days=200)),
        Zone(id="zone-2", name="Poniente", description="Western districts", created_at=now - timedelta(days=190)),
    ]
    settings = [
        SystemSetting(id="setting-1", key="app.name", value="civicreports", description="Application name", group="general"),
        SystemSetting(id="setting-2", key="map.initialZoom", value="13", description="Initial map zoom", group="map"),
        SystemSetting(id="setting-3", key="map.center", value="19.4326,-99.1332", description="Initial map centre (lat, lng)", group="map"),
        SystemSetting(id="setting-4", key="notifications.email", value="true", description="Email notifications", group="notifications"),
        SystemSetting(id="setting-5", key="reports.requireApproval", value="true", description="Require approval before publishing", group="reports"),
    ]
    return {"users": users, "categories": categories, "zones": zones, "settings": settings}


def seed_reports(store: ReportStore, now: datetime | None = None) -> int:
    """Load demo reports into an empty store."""
    if store.list():
        return 0
    loaded = store.load(demo_reports(now or datetime.now(timezone.utc)))
    logger.info("Seeded %s demo reports", loaded)
    return loaded


def seed_catalog(catalog: AdminCatalog, now: datetime | None = None) -> None:
    catalog.load(**demo_catalog(now or datetime.now(timezone.utc)))
