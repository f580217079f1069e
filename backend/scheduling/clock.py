from __future__ import annotations

import re
from datetime import time


HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_hhmm(value: str) -> int | None:
    """Parse a strict ``HH:MM`` string into minutes since midnight (None if malformed)."""

    if not isinstance(value, str):
        return None
    m = HHMM_PATTERN.match(value.strip())
    if m is None:
        return None
    return int(m.group(1)) * 60 + int(m.group(2))


def to_minutes(value: time | str | int) -> int:
    if isinstance(value, bool):
        raise TypeError("boolean is not a time of day")
    if isinstance(value, int):
        return value
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    text = str(value).strip()
    # Stores and JSON payloads commonly carry seconds ("08:00:00").
    if len(text) == 8 and text.count(":") == 2:
        text = text[:5]
    minutes = parse_hhmm(text)
    if minutes is None:
        raise ValueError(f"invalid time of day: {value!r}")
    return minutes


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def minutes_to_time(minutes: int) -> time:
    return time(hour=minutes // 60, minute=minutes % 60)


def format_duration(minutes: int) -> str:
    """Human-readable duration: ``"50min"``, ``"6h"``, ``"2h 30min"``."""

    if minutes <= 0:
        return "0min"
    hours, rest = divmod(int(minutes), 60)
    if hours == 0:
        return f"{rest}min"
    if rest == 0:
        return f"{hours}h"
    return f"{hours}h {rest}min"
