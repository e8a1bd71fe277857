# app/services/time_utils.py
"""
Wall-clock helpers. Every time of day is a zero-padded "HH:MM" string;
math is done on minutes since midnight.
"""
import re
from datetime import time
from typing import List, Union

from app.core.exceptions import FormatError

TIME_RE = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")
STORED_TIME_RE = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9](:[0-5][0-9](\.\d+)?)?$")

MINUTES_PER_DAY = 24 * 60


def parse_time(value: str) -> str:
    """Validate an "HH:MM" string and return it unchanged."""
    if not isinstance(value, str) or not TIME_RE.match(value):
        raise FormatError(f"Invalid time '{value}', expected HH:MM")
    return value


def format_time(hours: int, minutes: int) -> str:
    return f"{hours:02d}:{minutes:02d}"


def time_to_minutes(value: str) -> int:
    hours, minutes = value.split(":")[:2]
    return int(hours) * 60 + int(minutes)


def minutes_to_time(total_minutes: int) -> str:
    # wraps past midnight, the same way a wall clock does
    return format_time((total_minutes // 60) % 24, total_minutes % 60)


def compare_times(a: str, b: str) -> int:
    """Return -1, 0 or 1 ordering a and b by minutes since midnight."""
    diff = time_to_minutes(a) - time_to_minutes(b)
    if diff < 0:
        return -1
    if diff > 0:
        return 1
    return 0


def minutes_between(start: str, end: str) -> int:
    return time_to_minutes(end) - time_to_minutes(start)


def is_time_in_range(value: str, start: str, end: str) -> bool:
    """Inclusive start, exclusive end."""
    t = time_to_minutes(value)
    return time_to_minutes(start) <= t < time_to_minutes(end)


def ranges_overlap(start1: str, end1: str, start2: str, end2: str) -> bool:
    return max(time_to_minutes(start1), time_to_minutes(start2)) < min(
        time_to_minutes(end1), time_to_minutes(end2)
    )


def is_range_within(inner_start: str, inner_end: str, outer_start: str, outer_end: str) -> bool:
    return (
        time_to_minutes(inner_start) >= time_to_minutes(outer_start)
        and time_to_minutes(inner_end) <= time_to_minutes(outer_end)
    )


def sort_breaks(breaks):
    """Return breaks ordered by start time. Accepts anything with .start / .end."""
    return sorted(breaks, key=lambda br: time_to_minutes(br.start))


def generate_time_options(start_hour: int = 0, end_hour: int = 24, step_minutes: int = 30) -> List[str]:
    """
    Times for a picker widget, from start_hour (inclusive) to end_hour (exclusive).
    A step that does not divide the window evenly just stops at the last whole step.
    """
    if step_minutes <= 0:
        raise FormatError("step_minutes must be positive")

    options = []
    minutes = start_hour * 60
    end_minutes = min(end_hour * 60, MINUTES_PER_DAY)
    while minutes < end_minutes:
        options.append(minutes_to_time(minutes))
        minutes += step_minutes
    return options


def normalize_stored_time(raw: Union[str, time]) -> str:
    """
    Convert a database time ("HH:MM:SS", "HH:MM" or a datetime.time) to "HH:MM".
    Seconds are dropped, never rounded.
    """
    if isinstance(raw, time):
        return format_time(raw.hour, raw.minute)
    if not isinstance(raw, str) or not STORED_TIME_RE.match(raw):
        raise FormatError(f"Invalid stored time '{raw}'")
    return raw[:5]


def to_stored_time(value: str) -> str:
    """Turn HH:MM into HH:MM:00, the shape working_days / breaks are written in."""
    return f"{parse_time(value)}:00"
