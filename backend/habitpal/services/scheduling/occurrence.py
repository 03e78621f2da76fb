"""Next-occurrence calculation for a wall-clock slot."""
from __future__ import annotations

import re
from datetime import datetime
from typing import Iterable, List, Tuple

from habitpal.services.scheduling import clock
from habitpal.services.scheduling.civil import WEEKDAY_CODES, CivilDateTime
from habitpal.services.scheduling.errors import InvalidRecurrence, InvalidTimeOfDay

_TIME_OF_DAY_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
DAYS_PER_WEEK = 7


def parse_time_of_day(value: str) -> Tuple[int, int]:
    """Parse ``HH:MM`` (24-hour clock) into ``(hour, minute)``."""
    if not isinstance(value, str):
        raise InvalidTimeOfDay("start time must be a string in HH:MM format")
    match = _TIME_OF_DAY_RE.match(value.strip())
    if not match:
        raise InvalidTimeOfDay(f"'{value}' is not a valid HH:MM time")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise InvalidTimeOfDay(f"'{value}' is out of range (00:00-23:59)")
    return hour, minute


def weekday_numbers(codes: Iterable[str]) -> List[int]:
    """Map weekday codes (``MO``..``SU``) to sorted unique numbers, 0 = Sunday."""
    numbers = set()
    for code in codes:
        normalized = str(code).strip().upper()
        if normalized not in WEEKDAY_CODES:
            raise InvalidRecurrence(f"'{code}' is not a weekday code (MO, TU, WE, TH, FR, SA, SU)")
        numbers.add(WEEKDAY_CODES.index(normalized))
    return sorted(numbers)


def days_until_next(today: int, targets: Iterable[int], today_passed: bool) -> int:
    """Days from ``today`` to the nearest target weekday.

    Today only counts while its slot is still ahead; when every target has
    been used up this week the answer is seven (same weekday, next week).
    """
    offsets = sorted((target - today + DAYS_PER_WEEK) % DAYS_PER_WEEK for target in targets)
    for offset in offsets:
        if offset == 0 and today_passed:
            continue
        return offset
    return DAYS_PER_WEEK


def next_occurrence(
    now: datetime,
    time_of_day: str,
    target_weekdays: Iterable[str] | None,
    timezone_name: str,
) -> CivilDateTime:
    """Return the first civil time at ``time_of_day`` strictly after ``now``'s minute."""
    hour, minute = parse_time_of_day(time_of_day)
    targets = weekday_numbers(target_weekdays or ())
    current = clock.civil_from_instant(now, timezone_name)

    target_minutes = hour * 60 + minute
    today_passed = current.minutes_of_day >= target_minutes

    if not targets:
        days = 1 if today_passed else 0
    else:
        days = days_until_next(current.weekday, targets, today_passed)

    slot = clock.add_days(current, days, timezone_name).at(hour, minute)
    return clock.resolve_wall_time(slot, timezone_name)
