"""Location parsing and distance ranking tests."""

from datetime import datetime, timezone

import pytest

from civicreports.schemas.report import Location, Report
from civicreports.services.geo_service import (
    DEFAULT_CENTER,
    KNOWN_PLACES,
    derived_coordinates,
    haversine_km,
    parse_location,
    reports_near,
)


def _report(report_id, lat, lng, name="Somewhere"):
    return Report(
        id=report_id,
        title=f"Report {report_id}",
        category="Road",
        status="open",
        location=Location(name=name, lat=lat, lng=lng),
        created_at=datetime(2024, 3, 1, tzinfo=timezone.utc),
    )


def test_parse_coordinates_with_name():
    loc = parse_location("19.43, -99.13 (Zócalo)")
    assert loc == Location(name="Zócalo", lat=19.43, lng=-99.13)


def test_parse_bare_coordinates():
    loc = parse_location("19.5, -99.2")
    assert (loc.lat, loc.lng) == (19.5, -99.2)
    assert loc.name == "19.5, -99.2"


def test_parse_known_place():
    loc = parse_location("Parque Lincoln")
    assert (loc.lat, loc.lng) == KNOWN_PLACES["Parque Lincoln"]


def test_parse_known_place_in_parentheses():
    loc = parse_location("Near the fountain (Bellas Artes)")
    assert loc.name == "Bellas Artes"
    assert (loc.lat, loc.lng) == KNOWN_PLACES["Bellas Artes"]


def test_unknown_place_gets_stable_derived_coordinates():
    first = parse_location("Calle Sin Nombre 42")
    second = parse_location("Calle Sin Nombre 42")
    assert first == second
    assert first.name == "Calle Sin Nombre 42"
    assert (first.lat, first.lng) == derived_coordinates("Calle Sin Nombre 42")
    assert abs(first.lat - DEFAULT_CENTER[0]) < 0.5


def test_empty_location():
    loc = parse_location("  ")
    assert loc.name == "Unknown location"


def test_haversine_known_distance():
    # Mexico City to Seattle is roughly 3,800 km
    assert haversine_km(19.4326, -99.1332, 47.6062, -122.3321) == pytest.approx(3800, rel=0.05)
    assert haversine_km(10, 10, 10, 10) == 0


def test_reports_near_orders_by_distance_and_applies_radius():
    reports = [
        _report(1, 19.50, -99.13),
        _report(2, 19.4326, -99.1332),
        _report(3, 47.6062, -122.3321),
    ]
    ranked = reports_near(reports, 19.4326, -99.1332, radius_km=50)
    assert [r.report.id for r in ranked] == [2, 1]
    assert ranked[0].distance_km == 0
