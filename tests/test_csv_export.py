"""CSV export tests."""

from datetime import date, datetime, timezone

import pytest

from civicreports.core.vocabulary import ReportStatus
from civicreports.schemas.report import Location, Report
from civicreports.services.aggregation import CategoryCount, TimeBucket
from civicreports.services.csv_export import (
    CSV_MEDIA_TYPE,
    NothingToExport,
    category_filename,
    export_categories,
    export_locations,
    export_reports,
    export_time_series,
    locations_filename,
    parse_csv,
    reports_filename,
    time_series_filename,
    to_csv,
)
from civicreports.services.filter_state import FilterState

TODAY = date(2024, 3, 20)


def _state(time_frame="month"):
    state = FilterState(today=TODAY)
    state.set_time_frame(time_frame)
    return state


def test_round_trip_with_awkward_fields():
    rows = [
        ["Av. Reforma, 123", 'He said "fix it"', "line one\nline two"],
        ["plain", "", "x"],
    ]
    text = to_csv(rows, ["a", "b", "c"])
    headers, parsed = parse_csv(text)
    assert headers == ["a", "b", "c"]
    assert parsed == rows


def test_quoting_and_line_endings():
    text = to_csv([["a,b", 'say "hi"', 3]], ["x", "y", "z"])
    assert text == 'x,y,z\r\n"a,b","say ""hi""",3\r\n'


def test_empty_rows_produce_nothing():
    with pytest.raises(NothingToExport):
        to_csv([], ["a"])


def test_time_series_filename():
    state = _state("day")
    state.selected_day = 5
    assert time_series_filename(state, TODAY) == "reports_day_2024_March_day5_2024-03-20.csv"
    assert time_series_filename(_state("month"), TODAY) == "reports_month_2024_March_2024-03-20.csv"
    assert time_series_filename(_state("year"), TODAY) == "reports_year_2024_2024-03-20.csv"


def test_category_and_location_filenames():
    assert category_filename({"Urban Planning", "Road"}, TODAY) == (
        "category_distribution_Road_and_Urban_Planning_2024-03-20.csv"
    )
    assert category_filename(set(), TODAY) == "category_distribution_2024-03-20.csv"
    assert locations_filename("categories", TODAY) == "map-locations-by-category_2024-03-20.csv"
    assert locations_filename("reports", TODAY) == "map-locations-by-timeframe_2024-03-20.csv"
    assert reports_filename(TODAY) == "reports_all_2024-03-20.csv"
    assert reports_filename(TODAY, ReportStatus.OPEN) == "reports_open_2024-03-20.csv"


def test_time_series_columns_follow_visibility():
    state = _state("week")
    state.show_in_progress = False
    buckets = [TimeBucket(name="Sun", open=2, in_progress=1, closed=1), TimeBucket(name="Mon")]
    export = export_time_series(buckets, state, TODAY)
    headers, rows = parse_csv(export.content)
    assert headers == ["Time Period", "Open Reports", "Closed Reports"]
    assert rows == [["Sun", "2", "1"], ["Mon", "0", "0"]]
    assert export.media_type == CSV_MEDIA_TYPE
    assert export.row_count == 2


def test_category_percentages_use_overall_total():
    counts = [CategoryCount("Road", 3), CategoryCount("Vandalism", 1)]
    export = export_categories(counts, {"Vandalism"}, TODAY)
    _, rows = parse_csv(export.content)
    assert rows == [["Vandalism", "1", "25.00%"]]


def test_category_export_without_match_is_empty():
    with pytest.raises(NothingToExport):
        export_categories([CategoryCount("Road", 3)], {"Missing"}, TODAY)


def test_location_and_report_exports():
    report = Report(
        id=1,
        title="Pothole, deep",
        category="Road",
        status=ReportStatus.IN_PROGRESS,
        location=Location(name="Condesa", lat=19.4128, lng=-99.1732),
        tags=["urgent", "night"],
        created_at=datetime(2024, 3, 3, 8, tzinfo=timezone.utc),
    )
    headers, rows = parse_csv(export_locations([report], "reports", TODAY).content)
    assert headers == ["id", "title", "status", "category", "date", "location", "lat", "lng", "tags"]
    assert rows[0][1] == "Pothole, deep"
    assert rows[0][8] == "urgent;night"

    _, rows = parse_csv(export_reports([report], TODAY).content)
    assert rows[0][3] == "In Progress"
    assert rows[0][7] == ""

    with pytest.raises(NothingToExport):
        export_locations([], "reports", TODAY)
