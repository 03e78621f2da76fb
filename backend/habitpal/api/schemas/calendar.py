"""Schemas for calendar event endpoints."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from habitpal.api.schemas.habits import SchedulePreview
from habitpal.services.calendar.base import CalendarEvent


class SingleEventRequest(BaseModel):
    summary: str = Field(..., min_length=1, max_length=200)
    date: str = Field(..., description="YYYY-MM-DD, today, tomorrow, a weekday or 'Wednesday, November 26'.")
    start_time: str = Field(..., description="HH:MM, 24-hour clock.")
    duration_minutes: Optional[int] = None
    timezone: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=2000)


class CalendarEventOut(BaseModel):
    id: str
    html_link: str
    summary: str
    start: str
    end: str
    timezone: str
    recurrence: List[str] = Field(default_factory=list)

    @classmethod
    def from_event(cls, event: CalendarEvent) -> "CalendarEventOut":
        return cls(
            id=event.id,
            html_link=event.html_link,
            summary=event.summary,
            start=event.start,
            end=event.end,
            timezone=event.timezone,
            recurrence=list(event.recurrence),
        )


class SingleEventResponse(BaseModel):
    event: CalendarEventOut
    schedule: SchedulePreview
    message: str
    request_id: str


class CalendarEventList(BaseModel):
    events: List[CalendarEventOut]
    message: str
    request_id: str
