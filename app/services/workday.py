# app/services/workday.py
"""
Helpers for the day-of-operations view: what is happening now, what is
next and what is done, relative to a given moment.

Appointments are anything with date / start_time / end_time / status.
"""
from datetime import date, datetime
from typing import List, Optional

from app.schemas.appointment import WorkdayAppointment, WorkdayResponse
from app.services.time_utils import format_time, is_time_in_range, minutes_between, time_to_minutes

ACTIONABLE = ("pending", "confirmed")
INACTIVE = ("cancelled", "no_show")


def _minute_of_day(now: datetime) -> int:
    return now.hour * 60 + now.minute


def _by_start(appointments) -> list:
    return sorted(appointments, key=lambda apt: time_to_minutes(apt.start_time))


def appointments_for_date(appointments, day: date) -> List:
    return _by_start(apt for apt in appointments if apt.date == day)


def current_appointment(appointments, now: datetime) -> Optional[object]:
    """The pending/confirmed appointment running at now, if any. Overlaps are not expected."""
    today = now.date()
    clock = format_time(now.hour, now.minute)
    for apt in appointments:
        if apt.date != today or apt.status not in ACTIONABLE:
            continue
        if is_time_in_range(clock, apt.start_time, apt.end_time):
            return apt
    return None


def upcoming_appointments(appointments, now: datetime) -> List:
    today = now.date()
    minute = _minute_of_day(now)
    return _by_start(
        apt
        for apt in appointments
        if apt.date == today
        and apt.status not in INACTIVE
        and time_to_minutes(apt.start_time) > minute
    )


def completed_appointments(appointments, now: datetime) -> List:
    """Explicitly completed, or pending/confirmed ones whose end has passed."""
    today = now.date()
    minute = _minute_of_day(now)
    done = []
    for apt in appointments:
        if apt.date != today:
            continue
        if apt.status == "completed":
            done.append(apt)
        elif apt.status in ACTIONABLE and time_to_minutes(apt.end_time) <= minute:
            done.append(apt)
    return _by_start(done)


def format_time_remaining(end_time: str, now: datetime) -> str:
    diff = time_to_minutes(end_time) - _minute_of_day(now)
    if diff <= 0:
        return "ending now"
    if diff < 60:
        return f"{diff} min left"
    h, m = divmod(diff, 60)
    if m == 0:
        return f"{h}h left"
    return f"{h}h {m}min left"


def format_time_until(start_time: str, now: datetime) -> str:
    diff = time_to_minutes(start_time) - _minute_of_day(now)
    if diff <= 0:
        return "now"
    if diff < 60:
        return f"in {diff}m"
    h, m = divmod(diff, 60)
    if m == 0:
        return f"in {h}h"
    return f"in {h}h {m}m"


def format_time_range(start_time: str, end_time: str) -> str:
    return f"{start_time[:5]} – {end_time[:5]}"


def gap_minutes(previous_end: str, next_start: str) -> int:
    return max(0, minutes_between(previous_end, next_start))


def format_break_duration(minutes: int) -> str:
    if minutes <= 0:
        return ""
    if minutes < 60:
        return f"{minutes}min break"
    h, m = divmod(minutes, 60)
    if m == 0:
        return f"{h}h break"
    return f"{h}h {m}min break"


def _entry(apt, **extra) -> WorkdayAppointment:
    entry = WorkdayAppointment.model_validate(apt)
    return entry.model_copy(update={"time_range": format_time_range(entry.start_time, entry.end_time), **extra})


def build_overview(appointments, now: datetime) -> WorkdayResponse:
    """
    The day view for now's date. now must already be in the specialist's
    timezone. Each upcoming entry carries the break since the appointment
    before it (the current one for the first entry).
    """
    todays = appointments_for_date(appointments, now.date())
    current = current_appointment(todays, now)

    upcoming = []
    previous = current
    for apt in upcoming_appointments(todays, now):
        gap = gap_minutes(previous.end_time, apt.start_time) if previous else 0
        upcoming.append(
            _entry(
                apt,
                time_until=format_time_until(apt.start_time, now),
                break_before=format_break_duration(gap) or None,
            )
        )
        previous = apt

    return WorkdayResponse(
        current=_entry(current, time_remaining=format_time_remaining(current.end_time, now)) if current else None,
        upcoming=upcoming,
        completed=[_entry(apt) for apt in completed_appointments(todays, now)],
    )
