"""Schedule habits and submit them to the calendar gateway."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from habitpal.observability.metrics import log_metric
from habitpal.observability.tracing import annotate, trace
from habitpal.services.calendar.base import CalendarEvent, CalendarEventRequest, CalendarGateway
from habitpal.services.scheduling import clock
from habitpal.services.scheduling.recurrence import describe_frequency
from habitpal.services.scheduling.scheduler import (
    HabitOccurrenceRequest,
    ScheduledOccurrence,
    schedule,
    schedule_single,
)

logger = logging.getLogger(__name__)


@dataclass
class HabitCreationResult:
    occurrence: ScheduledOccurrence
    event: CalendarEvent
    message: str


def event_request_for(occurrence: ScheduledOccurrence) -> CalendarEventRequest:
    """Gateway payload: civil start/end without offsets, zone passed separately."""
    return CalendarEventRequest(
        summary=occurrence.summary,
        description=occurrence.description,
        start_date_time=occurrence.start.isoformat(),
        end_date_time=occurrence.end.isoformat(),
        timezone=occurrence.timezone,
        recurrence=list(occurrence.recurrence_rule),
    )


def habit_confirmation(request: HabitOccurrenceRequest, occurrence: ScheduledOccurrence, event: CalendarEvent) -> str:
    message = (
        f'Created "{occurrence.summary}" on your calendar! '
        f"Your first session is {occurrence.start.display_date()} at {occurrence.start.display_time()}."
    )
    if occurrence.recurrence_rule:
        message += f" It will repeat {describe_frequency(request.recurrence)}."
    if event.html_link:
        message += f" You can view it here: {event.html_link}"
    return message


def single_event_confirmation(occurrence: ScheduledOccurrence, duration_minutes: int, event: CalendarEvent) -> str:
    message = (
        f'Event created! "{occurrence.summary}" on {occurrence.start.display_date()} '
        f"at {occurrence.start.display_time()} for {duration_minutes} minutes."
    )
    if event.html_link:
        message += f" View it here: {event.html_link}"
    return message


def create_habit_event(
    request: HabitOccurrenceRequest,
    gateway: CalendarGateway,
    *,
    now: Optional[datetime] = None,
) -> HabitCreationResult:
    """Schedule ``request`` and create its calendar event in one shot."""
    occurrence = schedule(request, now or clock.now_utc())
    metadata = {
        "provider": gateway.name,
        "timezone": occurrence.timezone,
        "recurrence": ";".join(occurrence.recurrence_rule),
    }
    with trace("habits.create_event", metadata=metadata) as span:
        event = gateway.create_event(event_request_for(occurrence))
        annotate(span, event_id=event.id, start=occurrence.start.isoformat())

    log_metric("habits.created", 1, metadata={"provider": gateway.name})
    logger.info("Habit '%s' scheduled as event %s starting %s", occurrence.summary, event.id, occurrence.start.isoformat())
    return HabitCreationResult(
        occurrence=occurrence,
        event=event,
        message=habit_confirmation(request, occurrence, event),
    )


def create_single_event(
    summary: str,
    event_date: date,
    start_time_of_day: str,
    timezone_name: str,
    gateway: CalendarGateway,
    *,
    duration_minutes: int,
    description: Optional[str] = None,
) -> HabitCreationResult:
    occurrence = schedule_single(
        summary,
        event_date,
        start_time_of_day,
        timezone_name,
        duration_minutes=duration_minutes,
        description=description,
    )
    with trace("calendar.create_single_event", metadata={"provider": gateway.name, "timezone": timezone_name}):
        event = gateway.create_event(event_request_for(occurrence))

    log_metric("calendar.single_event.created", 1, metadata={"provider": gateway.name})
    return HabitCreationResult(
        occurrence=occurrence,
        event=event,
        message=single_event_confirmation(occurrence, duration_minutes, event),
    )
