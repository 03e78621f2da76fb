"""Calendar gateway interface and shared types."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class CalendarEventRequest:
    """Event payload; start/end are civil times interpreted in ``timezone``."""

    summary: str
    description: str
    start_date_time: str
    end_date_time: str
    timezone: str
    recurrence: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CalendarEvent:
    id: str
    html_link: str
    summary: str
    start: str
    end: str
    timezone: str = ""
    recurrence: List[str] = field(default_factory=list)


class CalendarGatewayError(RuntimeError):
    """Opaque failure talking to the calendar provider."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CalendarNotConnected(CalendarGatewayError):
    """No usable credentials for the calendar provider."""


class CalendarGateway:
    """Base interface for calendar providers."""

    name = "base"

    def create_event(self, request: CalendarEventRequest) -> CalendarEvent:
        raise NotImplementedError

    def list_events(self, max_results: int = 10, time_min: Optional[datetime] = None) -> List[CalendarEvent]:
        """Upcoming events starting at ``time_min`` (default now), soonest first."""
        raise NotImplementedError

    def delete_event(self, event_id: str) -> bool:
        """Delete an event; ``False`` when the provider does not know the id."""
        raise NotImplementedError
