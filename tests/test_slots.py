from __future__ import annotations

from datetime import time

import pytest

from conftest import VALID_CONFIGURATION
from scheduling.constants import SHIFT_ORDER, Shift, Weekday
from scheduling.slots import ScheduleConfig, generate_all, generate_slots, shift_window


CONFIG = ScheduleConfig.from_values(VALID_CONFIGURATION)


@pytest.mark.parametrize("shift", SHIFT_ORDER)
def test_slots_are_contiguous_and_start_at_shift_start(shift) -> None:
    slots = generate_slots(CONFIG, shift)

    assert len(slots) == CONFIG.lessons_per_shift
    assert slots[0].start == CONFIG.start_of(shift)
    for current, following in zip(slots, slots[1:]):
        assert current.end == following.start
    for slot in slots:
        assert slot.end - slot.start == CONFIG.lesson_duration_minutes
        assert slot.shift == shift


def test_generation_is_deterministic() -> None:
    assert generate_slots(CONFIG, Shift.EVENING) == generate_slots(CONFIG, Shift.EVENING)
    assert generate_all(CONFIG) == generate_all(CONFIG)


def test_morning_slot_labels() -> None:
    labels = [s.time_range for s in generate_slots(CONFIG, Shift.MORNING)]
    assert labels == ["07:30-08:20", "08:20-09:10", "09:10-10:00", "10:00-10:50", "10:50-11:40"]


def test_missing_configuration_yields_no_slots() -> None:
    assert generate_slots(None, Shift.MORNING) == []
    assert shift_window(None, Shift.MORNING) is None
    assert generate_all(None) == {Shift.MORNING: [], Shift.AFTERNOON: [], Shift.EVENING: []}


def test_shift_window_matches_computed_end() -> None:
    window = shift_window(CONFIG, Shift.AFTERNOON)
    slots = generate_slots(CONFIG, Shift.AFTERNOON)

    assert (window.start_label, window.end_label) == ("13:00", "17:10")
    assert window.end == slots[-1].end


def test_config_accepts_orm_style_values() -> None:
    class Row:
        lesson_duration_minutes = 45
        lessons_per_shift = 2
        morning_start = time(8, 0)
        afternoon_start = "14:00:00"
        evening_start = "19:00"

    config = ScheduleConfig.from_values(Row())
    assert [s.time_range for s in generate_slots(config, Shift.MORNING)] == ["08:00-08:45", "08:45-09:30"]
    assert config.end_of(Shift.EVENING) == 19 * 60 + 90


def test_slot_key_names_weekday_and_range() -> None:
    slot = generate_slots(CONFIG, Shift.MORNING)[0]
    assert slot.key(Weekday.TUESDAY) == "TUESDAY-07:30-08:20"
