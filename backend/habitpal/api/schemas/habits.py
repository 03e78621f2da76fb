"""Schemas for habit scheduling endpoints."""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from habitpal.services.intent.base import HabitIntent
from habitpal.services.scheduling.civil import CivilDateTime
from habitpal.services.scheduling.recurrence import FrequencyType, RecurrencePattern
from habitpal.services.scheduling.scheduler import ScheduledOccurrence


class RecurrenceSchema(BaseModel):
    type: Literal["daily", "weekly", "biweekly", "monthly"]
    days_of_week: Optional[List[str]] = None
    interval: Optional[int] = None

    def to_pattern(self) -> RecurrencePattern:
        return RecurrencePattern(
            type=FrequencyType(self.type),
            days_of_week=tuple(self.days_of_week or ()),
            interval=self.interval,
        )


class HabitScheduleRequest(BaseModel):
    activity: str = Field(..., min_length=1, max_length=200)
    start_time: str = Field(..., description="HH:MM, 24-hour clock.")
    duration_minutes: Optional[int] = None
    recurrence: Optional[RecurrenceSchema] = None
    timezone: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=2000)


class CivilDateTimeSchema(BaseModel):
    year: int
    month: int
    day: int
    hour: int
    minute: int
    weekday: int
    weekday_code: str
    local: str

    @classmethod
    def from_civil(cls, civil: CivilDateTime) -> "CivilDateTimeSchema":
        return cls(
            year=civil.year,
            month=civil.month,
            day=civil.day,
            hour=civil.hour,
            minute=civil.minute,
            weekday=civil.weekday,
            weekday_code=civil.weekday_code,
            local=civil.isoformat(),
        )


class SchedulePreview(BaseModel):
    summary: str
    description: str
    start: CivilDateTimeSchema
    end: CivilDateTimeSchema
    timezone: str
    recurrence: List[str]
    first_occurrence: str

    @classmethod
    def from_occurrence(cls, occurrence: ScheduledOccurrence) -> "SchedulePreview":
        return cls(
            summary=occurrence.summary,
            description=occurrence.description,
            start=CivilDateTimeSchema.from_civil(occurrence.start),
            end=CivilDateTimeSchema.from_civil(occurrence.end),
            timezone=occurrence.timezone,
            recurrence=list(occurrence.recurrence_rule),
            first_occurrence=f"{occurrence.start.display_date()} at {occurrence.start.display_time()}",
        )


class SchedulePreviewResponse(BaseModel):
    schedule: SchedulePreview
    request_id: str


class HabitCreateResponse(BaseModel):
    event_id: str
    event_link: str
    schedule: SchedulePreview
    message: str
    request_id: str


class HabitExtractRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=8000)
    timezone: Optional[str] = None


class ExtractedHabit(BaseModel):
    intent: HabitIntent
    schedule: Optional[SchedulePreview] = None
    error: Optional[str] = None


class HabitExtractResponse(BaseModel):
    habits: List[ExtractedHabit] = Field(default_factory=list)
    needs_clarification: bool
    clarification_question: Optional[str] = None
    source: str
    request_id: str
