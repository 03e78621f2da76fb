"""Validation errors raised by the habit scheduler."""
from __future__ import annotations


class SchedulingError(ValueError):
    """Base class for input errors the caller can correct."""

    field: str = "request"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if field is not None:
            self.field = field

    def to_detail(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class InvalidTimezone(SchedulingError):
    field = "timezone"


class InvalidTimeOfDay(SchedulingError):
    field = "start_time"


class InvalidRecurrence(SchedulingError):
    field = "recurrence"


class InvalidDuration(SchedulingError):
    field = "duration_minutes"


class InvalidActivity(SchedulingError):
    field = "activity"


class InvalidEventDate(SchedulingError):
    field = "date"
