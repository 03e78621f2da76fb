"""Civil (wall-clock) date/time value type."""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Tuple

# Index is the weekday number used throughout the scheduler (0 = Sunday).
WEEKDAY_CODES: Tuple[str, ...] = ("SU", "MO", "TU", "WE", "TH", "FR", "SA")
WEEKDAY_NAMES: Tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)
MONTH_NAMES: Tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

MINUTES_PER_DAY = 24 * 60


def weekday_from_date(value: date) -> int:
    """Return the weekday number of a calendar date, 0 = Sunday."""
    return value.isoweekday() % 7


@dataclass(frozen=True)
class CivilDateTime:
    """Calendar date and wall time as read in one named timezone.

    The timezone travels next to the value by convention; no UTC offset is
    stored here. Instances are only built by the timezone clock, which
    derives ``weekday`` from the date.
    """

    year: int
    month: int
    day: int
    hour: int
    minute: int
    weekday: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month out of range: {self.month}")
        if not 1 <= self.day <= 31:
            raise ValueError(f"day out of range: {self.day}")
        if not 0 <= self.hour <= 23:
            raise ValueError(f"hour out of range: {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"minute out of range: {self.minute}")
        if not 0 <= self.weekday <= 6:
            raise ValueError(f"weekday out of range: {self.weekday}")

    @classmethod
    def from_datetime(cls, value: datetime) -> "CivilDateTime":
        return cls(
            year=value.year,
            month=value.month,
            day=value.day,
            hour=value.hour,
            minute=value.minute,
            weekday=weekday_from_date(value.date()),
        )

    @property
    def minutes_of_day(self) -> int:
        return self.hour * 60 + self.minute

    @property
    def weekday_code(self) -> str:
        return WEEKDAY_CODES[self.weekday]

    def date(self) -> date:
        return date(self.year, self.month, self.day)

    def at(self, hour: int, minute: int) -> "CivilDateTime":
        """Same calendar date, different wall time."""
        return replace(self, hour=hour, minute=minute)

    def isoformat(self) -> str:
        """Local date-time without an offset, e.g. ``2025-11-25T07:00:00``."""
        return (
            f"{self.year:04d}-{self.month:02d}-{self.day:02d}"
            f"T{self.hour:02d}:{self.minute:02d}:00"
        )

    def display_date(self) -> str:
        return f"{WEEKDAY_NAMES[self.weekday]}, {MONTH_NAMES[self.month - 1]} {self.day}"

    def display_time(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"
