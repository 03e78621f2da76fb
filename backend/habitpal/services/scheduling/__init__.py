"""Habit-to-calendar-occurrence scheduling core."""
from habitpal.services.scheduling.civil import CivilDateTime
from habitpal.services.scheduling.errors import (
    InvalidActivity,
    InvalidDuration,
    InvalidEventDate,
    InvalidRecurrence,
    InvalidTimeOfDay,
    InvalidTimezone,
    SchedulingError,
)
from habitpal.services.scheduling.recurrence import FrequencyType, RecurrencePattern, build_rule
from habitpal.services.scheduling.scheduler import (
    HabitOccurrenceRequest,
    ScheduledOccurrence,
    schedule,
    schedule_single,
)

__all__ = [
    "CivilDateTime",
    "FrequencyType",
    "HabitOccurrenceRequest",
    "InvalidActivity",
    "InvalidDuration",
    "InvalidEventDate",
    "InvalidRecurrence",
    "InvalidTimeOfDay",
    "InvalidTimezone",
    "RecurrencePattern",
    "ScheduledOccurrence",
    "SchedulingError",
    "build_rule",
    "schedule",
    "schedule_single",
]
