"""Advance a civil time by a number of minutes."""
from __future__ import annotations

from habitpal.services.scheduling import clock
from habitpal.services.scheduling.civil import MINUTES_PER_DAY, CivilDateTime
from habitpal.services.scheduling.errors import InvalidDuration


def add_minutes(civil: CivilDateTime, minutes: int, timezone_name: str) -> CivilDateTime:
    """Return the wall time ``minutes`` after ``civil``, carrying whole days."""
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise InvalidDuration("minutes must be an integer")
    if minutes < 0:
        raise InvalidDuration("minutes must not be negative")

    total = civil.minutes_of_day + minutes
    days, remainder = divmod(total, MINUTES_PER_DAY)
    hour, minute = divmod(remainder, 60)
    end = clock.add_days(civil, days, timezone_name).at(hour, minute)
    return clock.resolve_wall_time(end, timezone_name)
