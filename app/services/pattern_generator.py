# app/services/pattern_generator.py
"""
Turns a schedule pattern into the working days it describes.

All functions are pure: same pattern in, same list out, ordered by date.
Patterns are assumed valid (see schedule_validation.validate_pattern);
a rotation with a zero-length block is rejected there, not here.
"""
from datetime import date, timedelta
from typing import Dict, Iterable, Iterator, List

from app.schemas.schedule import (
    BulkPattern,
    GeneratedWorkingDay,
    RotationPattern,
    WeeklyPattern,
)


def each_day(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def sunday_based_weekday(day: date) -> int:
    """0=Sunday .. 6=Saturday (date.weekday() is 0=Monday)."""
    return (day.weekday() + 1) % 7


def _working_day(day: date, hours) -> GeneratedWorkingDay:
    return GeneratedWorkingDay(
        date=day,
        start_time=hours.start,
        end_time=hours.end,
        breaks=[br.model_copy() for br in hours.breaks],
    )


def generate_weekly(pattern: WeeklyPattern) -> List[GeneratedWorkingDay]:
    weekdays = set(pattern.days_of_week)
    return [
        _working_day(day, pattern.working_hours)
        for day in each_day(pattern.start_date, pattern.end_date)
        if sunday_based_weekday(day) in weekdays
    ]


def is_rotation_working_day(pattern: RotationPattern, day: date) -> bool:
    # cycle is anchored on start_date; dates before it are never working days
    offset = (day - pattern.start_date).days
    if offset < 0:
        return False
    return offset % (pattern.days_on + pattern.days_off) < pattern.days_on


def generate_rotation(pattern: RotationPattern) -> List[GeneratedWorkingDay]:
    return [
        _working_day(day, pattern.working_hours)
        for day in each_day(pattern.start_date, pattern.end_date)
        if is_rotation_working_day(pattern, day)
    ]


def generate_bulk(pattern: BulkPattern) -> List[GeneratedWorkingDay]:
    selected = sorted({d for d in pattern.dates if pattern.start_date <= d <= pattern.end_date})
    return [_working_day(day, pattern.working_hours) for day in selected]


GENERATORS = {
    "weekly": generate_weekly,
    "rotation": generate_rotation,
    "bulk": generate_bulk,
}


def generate_from_pattern(pattern) -> List[GeneratedWorkingDay]:
    generator = GENERATORS.get(pattern.type)
    if generator is None:
        raise ValueError(f"Unknown pattern type: {pattern.type}")
    return generator(pattern)


def filter_existing_dates(days: Iterable[GeneratedWorkingDay], existing_dates: Iterable[date]) -> List[GeneratedWorkingDay]:
    existing = set(existing_dates)
    return [day for day in days if day.date not in existing]


def count_new_and_existing(days: Iterable[GeneratedWorkingDay], existing_dates: Iterable[date]) -> Dict[str, int]:
    existing = set(existing_dates)
    new_count = 0
    existing_count = 0
    for day in days:
        if day.date in existing:
            existing_count += 1
        else:
            new_count += 1
    return {"new": new_count, "existing": existing_count}
