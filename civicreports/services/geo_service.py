"""Geo helpers: legacy location parsing and distance ranking."""

import logging
import math
import re
from dataclasses import dataclass

from civicreports.schemas.report import Location, Report

logger = logging.getLogger(__name__)

# Mexico City centre, used when nothing better is known
DEFAULT_CENTER = (19.4326, -99.1332)

KNOWN_PLACES: dict[str, tuple[float, float]] = {
    "Av. Reforma 123": (19.4326, -99.1332),
    "Calle 16 de Septiembre": (19.4328, -99.1386),
    "Parque Lincoln": (19.4284, -99.2007),
    "Bosque de Chapultepec": (19.4120, -99.1946),
    "Insurgentes Sur": (19.3984, -99.1713),
    "Centro Histórico": (19.4326, -99.1332),
    "Paseo de la Reforma": (19.4284, -99.1557),
    "Polanco": (19.4284, -99.1907),
    "Condesa": (19.4128, -99.1732),
    "Roma Norte": (19.4195, -99.1599),
    "Coyoacán": (19.3429, -99.1609),
    "Santa Fe": (19.3659, -99.2873),
    "Xochimilco": (19.2571, -99.1050),
    "Zócalo": (19.4326, -99.1332),
    "Alameda Central": (19.4362, -99.1443),
    "Bellas Artes": (19.4352, -99.1413),
    "Seattle, WA": (47.6062, -122.3321),
    "San Francisco, CA": (37.7749, -122.4194),
    "Colorado Mountains": (39.5501, -105.7821),
    "Central Iowa": (41.8781, -93.0977),
}

_COORDS_WITH_NAME = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*(?:\((.*)\))?\s*$")
_NAME_IN_PARENS = re.compile(r"\(([^)]+)\)")


@dataclass
class RankedReport:
    """Report ranked by distance from a point."""

    report: Report
    distance_km: float


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance between two lat/lng points in kilometers."""
    R = 6371.0  # Earth radius in km
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2
    )
    return R * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def derived_coordinates(name: str) -> tuple[float, float]:
    """Stable coordinates near the default centre for an unknown place name."""
    code_sum = sum(ord(ch) for ch in name)
    lat_offset = (code_sum % 200) / 1000
    lng_offset = ((code_sum * 13) % 200) / 1000
    return (
        round(19.4 + lat_offset - 0.1, 6),
        round(-99.15 + lng_offset - 0.1, 6),
    )


def parse_location(text: str) -> Location:
    """Turn a legacy free-text location into a structured one.

    Accepted shapes, in order: ``"lat, lng (name)"``, ``"lat, lng"``, a known
    place name, ``"... (known name)"``. Anything else keeps its text as the
    name and gets derived coordinates.
    """
    text = (text or "").strip()
    if not text:
        lat, lng = DEFAULT_CENTER
        return Location(name="Unknown location", lat=lat, lng=lng)

    match = _COORDS_WITH_NAME.match(text)
    if match:
        lat, lng = float(match.group(1)), float(match.group(2))
        if -90 <= lat <= 90 and -180 <= lng <= 180:
            name = (match.group(3) or "").strip() or f"{lat}, {lng}"
            return Location(name=name, lat=lat, lng=lng)

    if text in KNOWN_PLACES:
        lat, lng = KNOWN_PLACES[text]
        return Location(name=text, lat=lat, lng=lng)

    paren = _NAME_IN_PARENS.search(text)
    if paren and paren.group(1) in KNOWN_PLACES:
        name = paren.group(1)
        lat, lng = KNOWN_PLACES[name]
        return Location(name=name, lat=lat, lng=lng)

    logger.debug("Deriving coordinates for unknown location %r", text)
    lat, lng = derived_coordinates(text)
    return Location(name=text, lat=lat, lng=lng)


def reports_near(
    reports: list[Report],
    lat: float,
    lng: float,
    radius_km: float | None = None,
    limit: int = 50,
) -> list[RankedReport]:
    """Reports ranked by distance ascending, optionally within a radius."""
    ranked = [
        RankedReport(
            report=r,
            distance_km=round(haversine_km(lat, lng, r.location.lat, r.location.lng), 3),
        )
        for r in reports
    ]
    if radius_km is not None:
        ranked = [r for r in ranked if r.distance_km <= radius_km]
    ranked.sort(key=lambda r: (r.distance_km, r.report.id))
    return ranked[:limit]
