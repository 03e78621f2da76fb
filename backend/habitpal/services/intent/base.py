"""Intent source interface and the structured habit intent it yields."""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from habitpal.services.scheduling.civil import MINUTES_PER_DAY
from habitpal.services.scheduling.occurrence import parse_time_of_day
from habitpal.services.scheduling.recurrence import FrequencyType, RecurrencePattern
from habitpal.services.scheduling.scheduler import HabitOccurrenceRequest

DayCode = Literal["MO", "TU", "WE", "TH", "FR", "SA", "SU"]


class HabitIntent(BaseModel):
    """A habit commitment found in conversation text."""

    activity: str = Field(..., min_length=1, description="Habit activity, e.g. 'meditate'.")
    frequency_type: Literal["daily", "weekly", "biweekly", "monthly"] = "daily"
    days_of_week: List[DayCode] = Field(default_factory=list)
    preferred_start_time: Optional[str] = Field(default=None, description="HH:MM, 24-hour clock.")
    preferred_end_time: Optional[str] = Field(default=None, description="HH:MM, 24-hour clock.")
    duration_minutes: Optional[int] = Field(default=None, ge=1)
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    raw_text: str = ""

    @property
    def is_schedulable(self) -> bool:
        return bool(self.preferred_start_time)

    def resolved_duration(self, default_minutes: int) -> int:
        """Explicit duration, else the start/end gap, else ``default_minutes``."""
        if self.duration_minutes:
            return self.duration_minutes
        if self.preferred_start_time and self.preferred_end_time:
            start_hour, start_minute = parse_time_of_day(self.preferred_start_time)
            end_hour, end_minute = parse_time_of_day(self.preferred_end_time)
            gap = (end_hour * 60 + end_minute) - (start_hour * 60 + start_minute)
            if gap <= 0:
                gap += MINUTES_PER_DAY
            return gap
        return default_minutes

    def to_request(self, timezone: str, default_duration_minutes: int) -> Optional[HabitOccurrenceRequest]:
        if not self.preferred_start_time:
            return None
        return HabitOccurrenceRequest(
            activity=self.activity,
            start_time_of_day=self.preferred_start_time,
            timezone=timezone,
            recurrence=RecurrencePattern(
                type=FrequencyType(self.frequency_type),
                days_of_week=tuple(self.days_of_week),
            ),
            duration_minutes=self.resolved_duration(default_duration_minutes),
        )


class IntentExtraction(BaseModel):
    habits: List[HabitIntent] = Field(default_factory=list)
    needs_clarification: bool = False
    clarification_question: Optional[str] = None
    source: str = "rules"


class IntentSource:
    """Turns free conversation text into structured habit intents."""

    name = "base"

    def extract(self, conversation_text: str, timezone: str) -> IntentExtraction:
        raise NotImplementedError
