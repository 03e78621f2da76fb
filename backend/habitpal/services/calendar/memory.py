"""Process-local calendar gateway for development and tests."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional
from uuid import uuid4

from habitpal.services.calendar.base import CalendarEvent, CalendarEventRequest, CalendarGateway
from habitpal.services.scheduling import clock

logger = logging.getLogger(__name__)


class InMemoryCalendarGateway(CalendarGateway):
    name = "memory"

    def __init__(self) -> None:
        self._events: Dict[str, CalendarEvent] = {}
        self._lock = Lock()

    def create_event(self, request: CalendarEventRequest) -> CalendarEvent:
        event_id = uuid4().hex
        event = CalendarEvent(
            id=event_id,
            html_link=f"memory://events/{event_id}",
            summary=request.summary,
            start=request.start_date_time,
            end=request.end_date_time,
            timezone=request.timezone,
            recurrence=list(request.recurrence),
        )
        with self._lock:
            self._events[event_id] = event
        logger.info("Calendar event stored in memory %s (%s)", event_id, request.summary)
        return event

    def list_events(self, max_results: int = 10, time_min: Optional[datetime] = None) -> List[CalendarEvent]:
        if max_results < 1:
            raise ValueError("max_results must be at least 1")
        cutoff = time_min or datetime.now(timezone.utc)
        with self._lock:
            events = list(self._events.values())
        upcoming = sorted(
            (event for event in events if _start_instant(event) >= cutoff),
            key=_start_instant,
        )
        return upcoming[:max_results]

    def delete_event(self, event_id: str) -> bool:
        with self._lock:
            removed = self._events.pop(event_id, None)
        return removed is not None


def _start_instant(event: CalendarEvent) -> datetime:
    local = datetime.fromisoformat(event.start)
    if local.tzinfo is None:
        local = local.replace(tzinfo=clock.resolve_timezone(event.timezone or "UTC"))
    return local.astimezone(timezone.utc)
