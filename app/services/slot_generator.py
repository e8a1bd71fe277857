# app/services/slot_generator.py
"""
Cuts a working day into fixed-length slots for the day timeline.

Slots tile [start, end) exactly: each one starts where the previous ended,
and the last one is shortened instead of running past the end of the day.
"""
from typing import List, Optional, Sequence

from app.core.exceptions import ValidationError
from app.db.models.appointment import ACTIVE_STATUSES
from app.schemas.schedule import TimeRange, TimeSlot
from app.services.time_utils import minutes_to_time, normalize_stored_time, ranges_overlap, time_to_minutes


def _occupied_ranges(appointments) -> List[tuple]:
    ranges = []
    for apt in appointments:
        if apt.status not in ACTIVE_STATUSES:
            continue
        ranges.append((apt.start_time, apt.end_time))
    return ranges


def generate_time_slots(
    start_time: str,
    end_time: str,
    slot_duration: int,
    breaks: Sequence[TimeRange] = (),
    appointments: Optional[Sequence] = None,
) -> List[TimeSlot]:
    """
    appointments: anything with start_time / end_time / status attributes,
    already restricted to this day. Only pending and confirmed ones block a slot.
    A slot overlapping a break is a break even when it is also booked.
    """
    if slot_duration <= 0:
        raise ValidationError("slot duration must be positive")

    break_ranges = [(br.start, br.end) for br in breaks]
    booked_ranges = _occupied_ranges(appointments or [])

    day_end = time_to_minutes(end_time)
    slot_start = time_to_minutes(start_time)
    slots = []

    while slot_start < day_end:
        slot_end = min(slot_start + slot_duration, day_end)
        start, end = minutes_to_time(slot_start), minutes_to_time(slot_end)

        blocked_reason = None
        if any(ranges_overlap(start, end, b_start, b_end) for b_start, b_end in break_ranges):
            blocked_reason = "break"
        elif any(ranges_overlap(start, end, a_start, a_end) for a_start, a_end in booked_ranges):
            blocked_reason = "booked"

        slots.append(
            TimeSlot(
                start=start,
                end=end,
                available=blocked_reason is None,
                blocked_reason=blocked_reason,
            )
        )
        slot_start = slot_end

    return slots


def generate_slots_from_working_day(working_day, slot_duration: int, appointments=None) -> List[TimeSlot]:
    """Same as generate_time_slots but reads a persisted WorkingDay row."""
    breaks = [
        TimeRange(start=normalize_stored_time(br.start_time), end=normalize_stored_time(br.end_time))
        for br in working_day.breaks
    ]
    return generate_time_slots(
        start_time=normalize_stored_time(working_day.start_time),
        end_time=normalize_stored_time(working_day.end_time),
        slot_duration=slot_duration,
        breaks=breaks,
        appointments=appointments,
    )
