"""Tests for cutting a working day into timeline slots."""
from types import SimpleNamespace

import pytest

from app.core.exceptions import ValidationError
from app.schemas.schedule import TimeRange
from app.services.slot_generator import generate_slots_from_working_day, generate_time_slots
from app.services.time_utils import time_to_minutes


def apt(start, end, status="confirmed"):
    return SimpleNamespace(start_time=start, end_time=end, status=status)


def summary(slots):
    return [(s.start, s.end, s.blocked_reason) for s in slots]


class TestSlotCoverage:
    @pytest.mark.parametrize("duration", [5, 10, 15, 30, 60, 45, 7])
    def test_slots_tile_the_day(self, duration):
        """Every minute of [start, end) is in exactly one slot, even when the duration doesn't divide it."""
        slots = generate_time_slots("09:10", "17:55", duration)

        assert slots[0].start == "09:10"
        assert slots[-1].end == "17:55"
        for previous, following in zip(slots, slots[1:]):
            assert previous.end == following.start
        assert sum(time_to_minutes(s.end) - time_to_minutes(s.start) for s in slots) == 525

    def test_short_last_slot(self):
        slots = generate_time_slots("09:00", "10:10", 30)
        assert summary(slots) == [
            ("09:00", "09:30", None),
            ("09:30", "10:00", None),
            ("10:00", "10:10", None),
        ]

    def test_rejects_zero_duration(self):
        with pytest.raises(ValidationError):
            generate_time_slots("09:00", "10:00", 0)


class TestBlocking:
    def test_break_marks_overlapping_slot(self):
        slots = generate_time_slots(
            "09:00", "12:00", 30, breaks=[TimeRange(start="10:00", end="10:15")]
        )

        assert summary(slots) == [
            ("09:00", "09:30", None),
            ("09:30", "10:00", None),
            ("10:00", "10:30", "break"),
            ("10:30", "11:00", None),
            ("11:00", "11:30", None),
            ("11:30", "12:00", None),
        ]
        assert [s.available for s in slots] == [True, True, False, True, True, True]

    def test_confirmed_appointment_books_slots(self):
        slots = generate_time_slots("09:00", "12:00", 30, appointments=[apt("10:00", "11:00")])

        booked = [(s.start, s.end) for s in slots if s.blocked_reason == "booked"]
        assert booked == [("10:00", "10:30"), ("10:30", "11:00")]
        assert sum(s.available for s in slots) == 4

    def test_stored_appointment_times_with_seconds(self):
        slots = generate_time_slots("09:00", "10:00", 30, appointments=[apt("09:30:00", "10:00:00", "pending")])
        assert summary(slots)[1] == ("09:30", "10:00", "booked")

    @pytest.mark.parametrize("status", ["cancelled", "no_show", "completed"])
    def test_inactive_appointments_do_not_book(self, status):
        slots = generate_time_slots("09:00", "10:00", 30, appointments=[apt("09:00", "10:00", status)])
        assert all(s.available for s in slots)

    def test_break_wins_over_booking(self):
        slots = generate_time_slots(
            "09:00",
            "11:00",
            60,
            breaks=[TimeRange(start="09:30", end="09:45")],
            appointments=[apt("09:00", "11:00")],
        )
        assert summary(slots) == [("09:00", "10:00", "break"), ("10:00", "11:00", "booked")]


class TestFromWorkingDayRow:
    def test_reads_stored_shape(self):
        row = SimpleNamespace(
            start_time="09:00:00",
            end_time="11:00:00",
            breaks=[SimpleNamespace(start_time="10:00:00", end_time="10:30:00")],
        )

        slots = generate_slots_from_working_day(row, 30)

        assert summary(slots) == [
            ("09:00", "09:30", None),
            ("09:30", "10:00", None),
            ("10:00", "10:30", "break"),
            ("10:30", "11:00", None),
        ]
