# app/services/schedule_validation.py
"""
Rules a working day or pattern must satisfy before anything is written.

Every check raises ValidationError with the first rule that failed, so the
caller can show it as-is.
"""
from typing import Sequence

from app.core.exceptions import ValidationError
from app.schemas.schedule import (
    BulkPattern,
    RotationPattern,
    TimeRange,
    WeeklyPattern,
)
from app.services.time_utils import is_range_within, parse_time, sort_breaks, time_to_minutes

MAX_BREAKS = 10
DAYS_PER_WEEK = 7
MAX_ROTATION_BLOCK = 30


def validate_time_range(start: str, end: str, label: str = "time range"):
    parse_time(start)
    parse_time(end)
    if time_to_minutes(start) >= time_to_minutes(end):
        raise ValidationError(f"{label} end must be after start")


def validate_working_hours(start: str, end: str, breaks: Sequence[TimeRange]):
    validate_time_range(start, end, "working hours")

    if len(breaks) > MAX_BREAKS:
        raise ValidationError(f"at most {MAX_BREAKS} breaks are allowed")

    for br in breaks:
        validate_time_range(br.start, br.end, "break")

    for br in breaks:
        if not is_range_within(br.start, br.end, start, end):
            raise ValidationError("break must be inside working hours")

    ordered = sort_breaks(breaks)
    for current, following in zip(ordered, ordered[1:]):
        # touching breaks (12:00-12:30, 12:30-13:00) are allowed
        if time_to_minutes(current.end) > time_to_minutes(following.start):
            raise ValidationError("breaks must not overlap")


def validate_pattern(pattern):
    if pattern.start_date > pattern.end_date:
        raise ValidationError("pattern end date must not be before start date")

    hours = pattern.working_hours
    validate_working_hours(hours.start, hours.end, hours.breaks)

    if isinstance(pattern, WeeklyPattern):
        if not pattern.days_of_week:
            raise ValidationError("select at least one day of the week")
        if len(pattern.days_of_week) > DAYS_PER_WEEK or len(set(pattern.days_of_week)) != len(pattern.days_of_week):
            raise ValidationError("each day of the week can be selected only once")
        if any(day < 0 or day > 6 for day in pattern.days_of_week):
            raise ValidationError("day of week must be between 0 (Sunday) and 6 (Saturday)")
    elif isinstance(pattern, RotationPattern):
        for label, value in (("days on", pattern.days_on), ("days off", pattern.days_off)):
            if value < 1 or value > MAX_ROTATION_BLOCK:
                raise ValidationError(f"{label} must be between 1 and {MAX_ROTATION_BLOCK}")
    elif isinstance(pattern, BulkPattern):
        if not pattern.dates:
            raise ValidationError("select at least one date")
    else:
        raise ValidationError(f"unknown pattern type: {type(pattern).__name__}")
