# app/core/exceptions.py
"""
Domain errors raised by the scheduling services.

Routes never build HTTP errors for these themselves; app.main registers
one handler per class.
"""


class ScheduleError(Exception):
    """Base class for scheduling errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ScheduleError):
    """Input is malformed or breaks a schedule rule. Raised before any write."""


class FormatError(ValidationError):
    """A time or date string does not match its expected format."""


class NotFoundError(ScheduleError):
    """Missing record, or a record the caller does not own."""


class PersistenceError(ScheduleError):
    """The database rejected a read or write."""
