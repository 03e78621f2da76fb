"""Turn a structured habit request into its first calendar occurrence."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

from habitpal.services.scheduling import clock
from habitpal.services.scheduling.civil import CivilDateTime
from habitpal.services.scheduling.duration import add_minutes
from habitpal.services.scheduling.errors import InvalidActivity, InvalidDuration
from habitpal.services.scheduling.occurrence import next_occurrence, parse_time_of_day
from habitpal.services.scheduling.recurrence import (
    FrequencyType,
    RecurrencePattern,
    build_rule,
    coerce_frequency,
)

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 60
MAX_ACTIVITY_LENGTH = 200


@dataclass(frozen=True)
class HabitOccurrenceRequest:
    activity: str
    start_time_of_day: str
    timezone: str
    recurrence: Optional[RecurrencePattern] = None
    duration_minutes: int = DEFAULT_DURATION_MINUTES
    description: Optional[str] = None


@dataclass(frozen=True)
class ScheduledOccurrence:
    start: CivilDateTime
    end: CivilDateTime
    recurrence_rule: Tuple[str, ...]
    timezone: str
    summary: str
    description: str


def schedule(request: HabitOccurrenceRequest, now: datetime) -> ScheduledOccurrence:
    """Compute the first occurrence, end time and RRULE for a habit.

    ``now`` is read once by the caller; the result depends only on the
    arguments, so repeated calls with the same inputs agree.
    """
    summary = _summary_for(request.activity)
    duration = _validated_duration(request.duration_minutes)
    timezone_name = request.timezone.strip() if isinstance(request.timezone, str) else request.timezone
    clock.resolve_timezone(timezone_name)

    pattern = request.recurrence
    rule = build_rule(pattern)
    target_weekdays: Tuple[str, ...] = ()
    if pattern is not None:
        frequency = coerce_frequency(pattern.type)
        if frequency is FrequencyType.WEEKLY:
            target_weekdays = tuple(pattern.days_of_week or ())
        elif frequency is FrequencyType.BIWEEKLY and pattern.interval not in (None, 2):
            logger.info("Ignoring interval=%s for biweekly habit '%s'", pattern.interval, summary)

    start = next_occurrence(now, request.start_time_of_day, target_weekdays, timezone_name)
    end = add_minutes(start, duration, timezone_name)
    logger.debug(
        "Scheduled '%s' start=%s end=%s tz=%s rule=%s",
        summary,
        start.isoformat(),
        end.isoformat(),
        timezone_name,
        rule,
    )
    return ScheduledOccurrence(
        start=start,
        end=end,
        recurrence_rule=tuple(rule),
        timezone=timezone_name,
        summary=summary,
        description=_description_for(summary, request.description),
    )


def schedule_single(
    summary: str,
    event_date: date,
    start_time_of_day: str,
    timezone_name: str,
    *,
    duration_minutes: int = DEFAULT_DURATION_MINUTES,
    description: Optional[str] = None,
) -> ScheduledOccurrence:
    """One non-repeating event on an explicit civil date."""
    title = _summary_for(summary)
    duration = _validated_duration(duration_minutes)
    hour, minute = parse_time_of_day(start_time_of_day)
    start = clock.civil_at(event_date, hour, minute, timezone_name)
    end = add_minutes(start, duration, timezone_name)
    return ScheduledOccurrence(
        start=start,
        end=end,
        recurrence_rule=(),
        timezone=timezone_name,
        summary=title,
        description=(description or "").strip() or title,
    )


def _summary_for(activity: str) -> str:
    text = (activity or "").strip() if isinstance(activity, str) else ""
    if not text:
        raise InvalidActivity("activity must not be empty")
    if len(text) > MAX_ACTIVITY_LENGTH:
        raise InvalidActivity(f"activity must be at most {MAX_ACTIVITY_LENGTH} characters")
    return text[:1].upper() + text[1:]


def _description_for(summary: str, description: Optional[str]) -> str:
    cleaned = (description or "").strip()
    return cleaned or f"Habit tracking for: {summary}"


def _validated_duration(minutes: int) -> int:
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise InvalidDuration("duration_minutes must be an integer")
    if minutes < 1:
        raise InvalidDuration("duration_minutes must be positive")
    return minutes
