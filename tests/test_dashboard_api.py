"""Dashboard and CSV export API tests."""

from datetime import datetime, timezone

import pytest

from civicreports.core.vocabulary import ReportStatus
from civicreports.schemas.report import Location, Report
from civicreports.services.csv_export import parse_csv


def _report(report_id, created, status, category, place):
    return Report(
        id=report_id,
        title=f"Report {report_id}",
        category=category,
        status=status,
        location=Location(name=place, lat=19.43, lng=-99.15),
        created_at=created,
    )


@pytest.fixture
def loaded(client):
    client.store.load([
        _report(1, datetime(2024, 3, 3, 8, tzinfo=timezone.utc), ReportStatus.OPEN, "Road", "Polanco"),
        _report(2, datetime(2024, 3, 3, 9, tzinfo=timezone.utc), ReportStatus.RESOLVED, "Road", "Polanco"),
        _report(3, datetime(2024, 3, 12, 9, tzinfo=timezone.utc), ReportStatus.IN_PROGRESS, "Vandalism", "Condesa"),
        _report(4, datetime(2024, 1, 20, 9, tzinfo=timezone.utc), ReportStatus.OPEN, "Environment", "Condesa"),
    ])
    client.patch("/filters/default", json={"selected_year": 2024, "selected_month": 3})
    return client


def test_dashboard(loaded):
    r = loaded.get("/dashboard")
    assert r.status_code == 200
    body = r.json()
    assert body["stats"]["total_reports"] == 4
    assert body["stats"]["closed_issues"] == 1
    assert len(body["time_series"]) == 31
    assert body["time_series"][2] == {"name": "3", "open": 1, "in_progress": 0, "closed": 1}
    assert body["categories"][0] == {"name": "Road", "value": 2}
    assert body["hotspots"][0] == {"name": "Polanco", "count": 2}
    assert body["available_years"] == [2024]
    assert body["filters"]["selected_month"] == 3


def test_dashboard_recent_activities(client):
    client.post(
        "/reports",
        json={"title": "Fallen tree", "category": "Environment",
              "location": {"name": "Bosque de Chapultepec", "lat": 19.412, "lng": -99.1946}},
    )
    activities = client.get("/dashboard").json()["recent_activities"]
    assert activities[0]["type"] == "report_created"
    assert activities[0]["time"] == "Just now"


def test_time_series_export(loaded):
    r = loaded.get("/exports/time-series.csv")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert 'filename="reports_month_2024_March_' in r.headers["content-disposition"]
    headers, rows = parse_csv(r.text)
    assert headers == ["Time Period", "Open Reports", "In Progress Reports", "Closed Reports"]
    assert len(rows) == 31
    assert rows[2] == ["3", "1", "0", "1"]


def test_category_export_respects_selection(loaded):
    loaded.post("/filters/default/view", json={"view": "categories"})
    loaded.post("/filters/default/categories/Vandalism/toggle")
    r = loaded.get("/exports/categories.csv")
    assert r.status_code == 200
    assert "category_distribution_Vandalism_" in r.headers["content-disposition"]
    _, rows = parse_csv(r.text)
    assert rows == [["Vandalism", "1", "25.00%"]]


def test_locations_export(loaded):
    loaded.patch("/filters/default", json={"show_closed": False})
    r = loaded.get("/exports/locations.csv")
    _, rows = parse_csv(r.text)
    assert sorted(row[0] for row in rows) == ["1", "3"]
    assert "map-locations-by-timeframe_" in r.headers["content-disposition"]


def test_reports_export(loaded):
    r = loaded.get("/exports/reports.csv", params={"status": "open"})
    assert r.status_code == 200
    assert "reports_open_" in r.headers["content-disposition"]
    _, rows = parse_csv(r.text)
    assert sorted(row[0] for row in rows) == ["1", "4"]


def test_nothing_to_export(client):
    r = client.get("/exports/locations.csv")
    assert r.status_code == 404
    assert r.json() == {"detail": "Nothing to export"}
    assert "content-disposition" not in r.headers
    assert client.get("/exports/categories.csv").status_code == 404
    assert client.get("/exports/reports.csv").status_code == 404


def test_reading_unknown_sessions_does_not_grow_the_registry(client):
    for i in range(200):
        assert client.get("/dashboard", params={"session_id": f"s{i}"}).status_code == 200
    client.get("/exports/categories.csv", params={"session_id": "other"})
    assert len(client.sessions) == 0
