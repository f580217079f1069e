from __future__ import annotations

import pytest

from conftest import VALID_CONFIGURATION
from scheduling.clock import format_duration
from scheduling.errors import ConfigurationInvalid
from scheduling.validation import ensure_valid, validate_configuration


def _config(**overrides):
    data = dict(VALID_CONFIGURATION)
    data.update(overrides)
    return data


def _codes_by_field(errors) -> dict[str, set[str]]:
    out: dict[str, set[str]] = {}
    for e in errors:
        out.setdefault(e.field, set()).add(e.code)
    return out


def test_valid_configuration_has_no_errors() -> None:
    assert validate_configuration(VALID_CONFIGURATION) == []
    ensure_valid(VALID_CONFIGURATION)


def test_form_strings_are_accepted() -> None:
    assert validate_configuration(_config(lesson_duration_minutes="50", lessons_per_shift=" 5 ")) == []


def test_span_over_six_hours_is_reported_on_both_fields() -> None:
    errors = validate_configuration(_config(lesson_duration_minutes=120, lessons_per_shift=4))
    by_field = _codes_by_field(errors)
    assert "SHIFT_SPAN_EXCEEDED" in by_field["lesson_duration_minutes"]
    assert "SHIFT_SPAN_EXCEEDED" in by_field["lessons_per_shift"]
    span_errors = [e for e in errors if e.code == "SHIFT_SPAN_EXCEEDED"]
    assert "8h" in span_errors[0].message
    assert "6h" in span_errors[0].message


def test_morning_end_past_afternoon_start_is_rejected() -> None:
    errors = validate_configuration(
        _config(
            morning_start="07:30",
            lesson_duration_minutes=50,
            lessons_per_shift=6,
            afternoon_start="12:00",
            evening_start="18:00",
        )
    )
    overlap = [e for e in errors if e.code == "SHIFT_OVERLAP"]
    assert [e.field for e in overlap] == ["afternoon_start"]
    assert "12:30" in overlap[0].message
    assert "morning" in overlap[0].message


def test_afternoon_end_past_evening_start_is_rejected() -> None:
    errors = validate_configuration(
        _config(
            morning_start="06:00",
            lesson_duration_minutes=60,
            lessons_per_shift=6,
            afternoon_start="13:00",
            evening_start="18:00",
        )
    )
    overlap = [e for e in errors if e.code == "SHIFT_OVERLAP"]
    assert [e.field for e in overlap] == ["evening_start"]
    assert "19:00" in overlap[0].message
    assert "afternoon" in overlap[0].message


def test_evening_must_start_after_afternoon() -> None:
    errors = validate_configuration(_config(afternoon_start="18:00", evening_start="18:00", lessons_per_shift=1))
    order = [e for e in errors if e.code == "SHIFT_ORDER"]
    assert [e.field for e in order] == ["evening_start"]


@pytest.mark.parametrize(
    ("value", "code"),
    [
        (None, "REQUIRED"),
        ("", "REQUIRED"),
        ("abc", "NOT_AN_INTEGER"),
        (12.5, "NOT_AN_INTEGER"),
        (True, "NOT_AN_INTEGER"),
        (0, "NOT_POSITIVE"),
        (-10, "NOT_POSITIVE"),
        ("--5", "NOT_AN_INTEGER"),
        ("+-50", "NOT_AN_INTEGER"),
        ("\u00b2", "NOT_AN_INTEGER"),
        ("\u0665\u0660", "NOT_AN_INTEGER"),
        (121, "EXCEEDS_MAX"),
    ],
)
def test_lesson_duration_field_checks(value, code) -> None:
    errors = validate_configuration(_config(lesson_duration_minutes=value))
    assert code in _codes_by_field(errors)["lesson_duration_minutes"]


def test_lessons_per_shift_upper_bound() -> None:
    errors = validate_configuration(_config(lesson_duration_minutes=10, lessons_per_shift=21))
    assert _codes_by_field(errors) == {"lessons_per_shift": {"EXCEEDS_MAX"}}


@pytest.mark.parametrize("value", ["7:30", "24:00", "07:60", "0730", 730])
def test_malformed_shift_start(value) -> None:
    errors = validate_configuration(_config(morning_start=value))
    assert "INVALID_TIME_FORMAT" in _codes_by_field(errors)["morning_start"]


def test_shift_start_outside_window_names_the_window() -> None:
    errors = validate_configuration(_config(afternoon_start="11:00"))
    window = [e for e in errors if e.code == "OUTSIDE_SHIFT_WINDOW"]
    assert [e.field for e in window] == ["afternoon_start"]
    assert "afternoon" in window[0].message
    assert "12:00" in window[0].message and "18:00" in window[0].message


def test_window_bounds_are_inclusive() -> None:
    errors = validate_configuration(
        _config(
            lesson_duration_minutes=10,
            lessons_per_shift=1,
            morning_start="06:00",
            afternoon_start="18:00",
            evening_start="23:30",
        )
    )
    assert errors == []


def test_equal_shift_starts_break_ordering() -> None:
    errors = validate_configuration(
        _config(
            lesson_duration_minutes=10,
            lessons_per_shift=1,
            morning_start="12:00",
            afternoon_start="12:00",
        )
    )
    assert "SHIFT_ORDER" in _codes_by_field(errors)["afternoon_start"]


def test_evening_running_past_midnight_is_rejected() -> None:
    errors = validate_configuration(_config(evening_start="23:00"))
    assert _codes_by_field(errors) == {"evening_start": {"SHIFT_PAST_MIDNIGHT"}}


def test_all_violations_are_collected_in_one_pass() -> None:
    errors = validate_configuration(
        {
            "lesson_duration_minutes": 500,
            "lessons_per_shift": 0,
            "morning_start": "05:00",
            "afternoon_start": "bad",
            "evening_start": None,
        }
    )
    by_field = _codes_by_field(errors)
    assert by_field == {
        "lesson_duration_minutes": {"EXCEEDS_MAX"},
        "lessons_per_shift": {"NOT_POSITIVE"},
        "morning_start": {"OUTSIDE_SHIFT_WINDOW"},
        "afternoon_start": {"INVALID_TIME_FORMAT"},
        "evening_start": {"REQUIRED"},
    }


def test_ensure_valid_raises_with_every_error() -> None:
    with pytest.raises(ConfigurationInvalid) as exc_info:
        ensure_valid(_config(lesson_duration_minutes=120, lessons_per_shift=4))
    assert {e.field for e in exc_info.value.errors} >= {"lesson_duration_minutes", "lessons_per_shift"}


@pytest.mark.parametrize(
    ("minutes", "text"),
    [(0, "0min"), (45, "45min"), (360, "6h"), (150, "2h 30min")],
)
def test_format_duration(minutes, text) -> None:
    assert format_duration(minutes) == text
