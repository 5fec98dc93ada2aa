"""CSV serialisation of dashboard data and report lists."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date

from civicreports.core.vocabulary import STATUS_LABELS, ReportStatus
from civicreports.schemas.report import Report
from civicreports.services.aggregation import MONTH_NAMES, CategoryCount, TimeBucket
from civicreports.services.filter_state import FilterState

logger = logging.getLogger(__name__)

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
LINE_TERMINATOR = "\r\n"


class NothingToExport(ValueError):
    """The selected data set is empty, so no file is produced."""


@dataclass
class CsvExport:
    filename: str
    content: str
    row_count: int
    media_type: str = CSV_MEDIA_TYPE


def to_csv(rows: Sequence[Sequence[object]], headers: Sequence[str]) -> str:
    """Header row plus ``rows``, RFC 4180 quoting, CRLF line endings.

    Fields holding a comma, double quote or line break are quoted with
    inner quotes doubled. ``None`` becomes an empty field.
    """
    if not rows:
        raise NothingToExport("Nothing to export")
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator=LINE_TERMINATOR, quoting=csv.QUOTE_MINIMAL)
    writer.writerow(headers)
    writer.writerows(rows)
    return buf.getvalue()


def parse_csv(text: str) -> tuple[list[str], list[list[str]]]:
    """Split CSV text back into ``(headers, rows)``."""
    reader = csv.reader(io.StringIO(text, newline=""))
    records = list(reader)
    if not records:
        return [], []
    return records[0], records[1:]


def _slug(value: str) -> str:
    return "_".join(value.split())


# -- filenames -----------------------------------------------------------


def time_series_filename(state: FilterState, today: date) -> str:
    """Names only the parts of the window the time frame actually uses."""
    parts = [f"reports_{state.time_frame}"]
    if state.selected_year:
        parts.append(f"_{state.selected_year}")
    if state.time_frame != "year" and state.selected_month is not None:
        parts.append(f"_{MONTH_NAMES[state.selected_month - 1]}")
    if state.time_frame == "day" and state.selected_day:
        parts.append(f"_day{state.selected_day}")
    return "".join(parts) + f"_{today.isoformat()}.csv"


def category_filename(categories: Iterable[str], today: date) -> str:
    selected = sorted(categories)
    suffix = "_" + "_and_".join(_slug(c) for c in selected) if selected else ""
    return f"category_distribution{suffix}_{today.isoformat()}.csv"


def locations_filename(view: str, today: date) -> str:
    scope = "by-category" if view == "categories" else "by-timeframe"
    return f"map-locations-{scope}_{today.isoformat()}.csv"


def reports_filename(
    today: date,
    status: ReportStatus | None = None,
    categories: Iterable[str] = (),
) -> str:
    selected = sorted(categories)
    if status is not None:
        scope = status.value
    elif selected:
        scope = "_".join(_slug(c).lower() for c in selected)
    else:
        scope = "all"
    return f"reports_{scope}_{today.isoformat()}.csv"


# -- exports -------------------------------------------------------------


def export_time_series(buckets: list[TimeBucket], state: FilterState, today: date) -> CsvExport:
    """Time series with one column per visible status."""
    headers = ["Time Period"]
    if state.show_open:
        headers.append("Open Reports")
    if state.show_in_progress:
        headers.append("In Progress Reports")
    if state.show_closed:
        headers.append("Closed Reports")

    rows = []
    for bucket in buckets:
        row: list[object] = [bucket.name]
        if state.show_open:
            row.append(bucket.open)
        if state.show_in_progress:
            row.append(bucket.in_progress)
        if state.show_closed:
            row.append(bucket.closed)
        rows.append(row)

    content = to_csv(rows, headers)
    logger.info("Exported %s time periods", len(rows))
    return CsvExport(time_series_filename(state, today), content, len(rows))


def export_categories(counts: list[CategoryCount], selected: set[str], today: date) -> CsvExport:
    """Category counts with their share of all reports.

    Percentages use the total across every category, also when only some
    categories are selected for export.
    """
    total = sum(c.value for c in counts)
    chosen = [c for c in counts if c.name in selected] if selected else counts
    rows = [
        [c.name, c.value, f"{(c.value / total) * 100:.2f}%" if total else "0.00%"]
        for c in chosen
    ]
    content = to_csv(rows, ["Category", "Reports Count", "Percentage"])
    logger.info("Exported %s categories", len(rows))
    return CsvExport(category_filename(selected, today), content, len(rows))


def export_locations(reports: list[Report], view: str, today: date) -> CsvExport:
    """Map markers for the reports currently on screen."""
    rows = [
        [
            r.id,
            r.title,
            r.status.value,
            r.category,
            r.created_at.isoformat(),
            r.location.name,
            r.location.lat,
            r.location.lng,
            ";".join(r.tags),
        ]
        for r in reports
    ]
    headers = ["id", "title", "status", "category", "date", "location", "lat", "lng", "tags"]
    content = to_csv(rows, headers)
    logger.info("Exported %s report locations", len(rows))
    return CsvExport(locations_filename(view, today), content, len(rows))


def export_reports(
    reports: list[Report],
    today: date,
    status: ReportStatus | None = None,
    categories: Iterable[str] = (),
) -> CsvExport:
    """Full report list as shown in the admin table."""
    headers = [
        "ID", "Title", "Description", "Status", "Priority", "Category",
        "Location", "Assigned To", "Created At", "Latitude", "Longitude",
    ]
    rows = [
        [
            r.id,
            r.title,
            r.description,
            STATUS_LABELS[r.status],
            r.priority.value,
            r.category,
            r.location.name,
            r.assigned_to or "",
            r.created_at.isoformat(),
            r.location.lat,
            r.location.lng,
        ]
        for r in reports
    ]
    content = to_csv(rows, headers)
    return CsvExport(reports_filename(today, status, categories), content, len(rows))
