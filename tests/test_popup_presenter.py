"""
Popup content, date formatting and placement.
"""
from datetime import datetime, timezone

import pytest

from yardmap.domain.models.map_config import default_detail_fields
from yardmap.domain.models.region_model import MatchResult, Region
from yardmap.presentation.popup_presenter import (
    PopupPresenter, compute_popup_position, format_date_time, parse_date_time
)

REGION = Region("Dock A", 0, 0, 10, 10, "причал", "A1")


@pytest.fixture
def presenter():
    return PopupPresenter(default_detail_fields())


def test_no_dataset(presenter):
    title, body = presenter.build(None, "Dock A")

    assert title == "Dock A"
    assert "No data to display" in body


def test_no_matches_names_field_and_value(presenter):
    match = MatchResult(REGION, "причал", "A1", [])

    _, body = presenter.build(match, "Dock A")

    assert "No matches for &quot;причал&quot; = &quot;A1&quot;" in body


def test_records_are_numbered_and_empty_fields_skipped(presenter):
    records = [
        {"причал": "A1", "судно": "Nord", "вид_подхода": ""},
        {"причал": "A1", "судно": "<Sea Star>", "дата_швартовки": "05.03.2024 14:30"},
    ]
    match = MatchResult(REGION, "причал", "A1", records)

    _, body = presenter.build(match, "Dock A")

    assert "Record 1" in body and "Record 2" in body
    assert "Вид подхода" not in body
    assert "&lt;Sea Star&gt;" in body
    assert "05.03.2024, 14:30" in body


def test_parse_dotted_and_iso_dates():
    assert parse_date_time("05.03.2024 14:30:15") == datetime(2024, 3, 5, 14, 30, 15)
    assert parse_date_time("2024-03-05T14:30") == datetime(2024, 3, 5, 14, 30)
    assert parse_date_time("") is None
    assert parse_date_time("someday") is None


def test_aware_timestamps_are_shown_in_local_time():
    expected = datetime(2024, 3, 5, 12, 0, tzinfo=timezone.utc).astimezone()

    assert format_date_time("2024-03-05T12:00:00Z") == expected.strftime("%d.%m.%Y, %H:%M")


def test_unreadable_dates_are_shown_verbatim():
    assert format_date_time("after lunch") == "after lunch"
    assert format_date_time(None) == ""


def test_popup_sits_below_right_of_cursor():
    assert compute_popup_position((100, 100), (200, 80), (1000, 800)) == (115, 115)


def test_popup_flips_at_viewport_edges():
    left, top = compute_popup_position((900, 750), (200, 80), (1000, 800))

    assert left == 900 - 200 - 15
    assert top == 750 - 80 - 15
