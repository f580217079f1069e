from __future__ import annotations

import re
from typing import Any, Mapping

from scheduling.clock import format_duration, format_minutes, parse_hhmm
from scheduling.constants import (
    COUNT_FIELD,
    DURATION_FIELD,
    LAST_MINUTE_OF_DAY,
    MAX_LESSON_DURATION_MINUTES,
    MAX_LESSONS_PER_SHIFT,
    MAX_SHIFT_SPAN_MINUTES,
    SHIFT_LIMITS,
    SHIFT_ORDER,
    SHIFT_START_FIELDS,
    Shift,
)
from scheduling.errors import ConfigurationInvalid, FieldError


INTEGER_PATTERN = re.compile(r"^[+-]?\d+$", re.ASCII)


def total_duration(lesson_duration_minutes: int, lessons_per_shift: int) -> int:
    return int(lesson_duration_minutes) * int(lessons_per_shift)


def shift_window_message(shift: Shift) -> str:
    limits = SHIFT_LIMITS[Shift(shift)]
    return (
        f"The {limits.label} shift must start between "
        f"{limits.earliest_start} and {limits.latest_start}."
    )


def is_within_shift_window(start_minutes: int, shift: Shift) -> bool:
    limits = SHIFT_LIMITS[Shift(shift)]
    earliest = parse_hhmm(limits.earliest_start)
    latest = parse_hhmm(limits.latest_start)
    return earliest <= start_minutes <= latest


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_bounded_int(
    raw: Mapping[str, Any],
    *,
    field: str,
    label: str,
    unit: str,
    maximum: int,
    errors: list[FieldError],
) -> int | None:
    value = raw.get(field)
    if _is_blank(value):
        errors.append(FieldError(field, "REQUIRED", f"{label} is required."))
        return None

    parsed: int | None = None
    if isinstance(value, bool):
        parsed = None
    elif isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        parsed = int(value) if value.is_integer() else None
    elif isinstance(value, str):
        text = value.strip()
        if INTEGER_PATTERN.match(text):
            parsed = int(text)

    if parsed is None:
        errors.append(FieldError(field, "NOT_AN_INTEGER", f"{label} must be a whole number."))
        return None
    if parsed < 1:
        errors.append(FieldError(field, "NOT_POSITIVE", f"{label} must be at least 1{unit}."))
        return None
    if parsed > maximum:
        errors.append(FieldError(field, "EXCEEDS_MAX", f"{label} cannot exceed {maximum}{unit}."))
        return None
    return parsed


def _check_shift_start(raw: Mapping[str, Any], shift: Shift, errors: list[FieldError]) -> int | None:
    field = SHIFT_START_FIELDS[shift]
    label = SHIFT_LIMITS[shift].label
    value = raw.get(field)
    if _is_blank(value):
        errors.append(FieldError(field, "REQUIRED", f"The {label} shift start is required."))
        return None

    minutes = parse_hhmm(value) if isinstance(value, str) else None
    if minutes is None:
        errors.append(FieldError(field, "INVALID_TIME_FORMAT", f"The {label} shift start must use the HH:MM format."))
        return None
    if not is_within_shift_window(minutes, shift):
        errors.append(FieldError(field, "OUTSIDE_SHIFT_WINDOW", shift_window_message(shift)))
    return minutes


def validate_configuration(raw: Mapping[str, Any]) -> list[FieldError]:
    """Check raw form values for a schedule configuration.

    Every violated rule produces its own error so a form can show all of them at
    once. An empty list means the configuration can be stored.
    """

    errors: list[FieldError] = []

    duration = _check_bounded_int(
        raw,
        field=DURATION_FIELD,
        label="Lesson duration",
        unit=" minute(s)",
        maximum=MAX_LESSON_DURATION_MINUTES,
        errors=errors,
    )
    count = _check_bounded_int(
        raw,
        field=COUNT_FIELD,
        label="Lessons per shift",
        unit=" lesson(s)",
        maximum=MAX_LESSONS_PER_SHIFT,
        errors=errors,
    )

    span: int | None = None
    if duration is not None and count is not None:
        span = total_duration(duration, count)
        if span > MAX_SHIFT_SPAN_MINUTES:
            message = (
                f"Total lesson time per shift ({format_duration(span)}) exceeds the maximum "
                f"of {format_duration(MAX_SHIFT_SPAN_MINUTES)}."
            )
            # Attached to both fields so either control can be corrected.
            errors.append(FieldError(DURATION_FIELD, "SHIFT_SPAN_EXCEEDED", message))
            errors.append(FieldError(COUNT_FIELD, "SHIFT_SPAN_EXCEEDED", message))

    starts: dict[Shift, int | None] = {shift: _check_shift_start(raw, shift, errors) for shift in SHIFT_ORDER}

    for earlier, later in zip(SHIFT_ORDER, SHIFT_ORDER[1:]):
        earlier_start = starts[earlier]
        later_start = starts[later]
        if earlier_start is None or later_start is None:
            continue
        earlier_label = SHIFT_LIMITS[earlier].label
        later_label = SHIFT_LIMITS[later].label
        later_field = SHIFT_START_FIELDS[later]

        if later_start <= earlier_start:
            errors.append(
                FieldError(
                    later_field,
                    "SHIFT_ORDER",
                    f"The {later_label} shift must start after the {earlier_label} shift "
                    f"({format_minutes(earlier_start)}).",
                )
            )

        if span is not None:
            earlier_end = earlier_start + span
            if earlier_end > later_start:
                errors.append(
                    FieldError(
                        later_field,
                        "SHIFT_OVERLAP",
                        f"The {later_label} shift cannot start before the {earlier_label} shift ends "
                        f"(computed end {format_minutes(earlier_end)}).",
                    )
                )

    if span is not None:
        for shift in SHIFT_ORDER:
            start = starts[shift]
            if start is None or start + span <= LAST_MINUTE_OF_DAY:
                continue
            errors.append(
                FieldError(
                    SHIFT_START_FIELDS[shift],
                    "SHIFT_PAST_MIDNIGHT",
                    f"The {SHIFT_LIMITS[shift].label} shift would run past 23:59 "
                    f"({format_duration(span)} from {format_minutes(start)}).",
                )
            )

    return errors


def ensure_valid(raw: Mapping[str, Any]) -> None:
    errors = validate_configuration(raw)
    if errors:
        raise ConfigurationInvalid(errors)
