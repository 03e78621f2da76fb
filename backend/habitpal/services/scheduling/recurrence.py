"""Recurrence patterns and their RRULE rendering."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from habitpal.services.scheduling.civil import WEEKDAY_CODES
from habitpal.services.scheduling.errors import InvalidRecurrence
from habitpal.services.scheduling.occurrence import weekday_numbers

# RFC 5545 lists BYDAY values starting on Monday.
BYDAY_ORDER: Tuple[str, ...] = WEEKDAY_CODES[1:] + WEEKDAY_CODES[:1]
BIWEEKLY_INTERVAL = 2


class FrequencyType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


_BASE_FREQUENCY = {
    FrequencyType.DAILY: "DAILY",
    FrequencyType.WEEKLY: "WEEKLY",
    FrequencyType.BIWEEKLY: "WEEKLY",
    FrequencyType.MONTHLY: "MONTHLY",
}

_UNIT_NAMES = {
    FrequencyType.DAILY: "days",
    FrequencyType.WEEKLY: "weeks",
    FrequencyType.MONTHLY: "months",
}


@dataclass(frozen=True)
class RecurrencePattern:
    type: FrequencyType
    days_of_week: Tuple[str, ...] = ()
    interval: Optional[int] = None


def coerce_frequency(value: FrequencyType | str) -> FrequencyType:
    try:
        return FrequencyType(value)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in FrequencyType)
        raise InvalidRecurrence(f"'{value}' is not a frequency ({allowed})") from exc


def canonical_days(days_of_week: Optional[Tuple[str, ...]]) -> List[str]:
    """Validate weekday codes and return them de-duplicated in MO..SU order."""
    numbers = weekday_numbers(days_of_week or ())
    codes = {WEEKDAY_CODES[number] for number in numbers}
    return [code for code in BYDAY_ORDER if code in codes]


def _validated_interval(interval: Optional[int]) -> Optional[int]:
    if interval is None:
        return None
    if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
        raise InvalidRecurrence(f"interval must be a positive integer, got {interval!r}")
    return interval


def build_rule(pattern: Optional[RecurrencePattern]) -> List[str]:
    """Render ``pattern`` as a one-element RRULE list; no pattern means ``[]``."""
    if pattern is None:
        return []

    frequency = coerce_frequency(pattern.type)
    interval = _validated_interval(pattern.interval)
    days = canonical_days(pattern.days_of_week)

    parts = [f"FREQ={_BASE_FREQUENCY[frequency]}"]
    if frequency is FrequencyType.BIWEEKLY:
        parts.append(f"INTERVAL={BIWEEKLY_INTERVAL}")
    elif interval is not None:
        parts.append(f"INTERVAL={interval}")
    if frequency is FrequencyType.WEEKLY and days:
        parts.append(f"BYDAY={','.join(days)}")
    return ["RRULE:" + ";".join(parts)]


def describe_frequency(pattern: Optional[RecurrencePattern]) -> str:
    """Human phrase for confirmation messages, e.g. ``every week on MO, WE``."""
    if pattern is None:
        return "once"
    frequency = coerce_frequency(pattern.type)
    if frequency is FrequencyType.BIWEEKLY:
        return "every two weeks"

    interval = _validated_interval(pattern.interval)
    if interval and interval > 1:
        phrase = f"every {interval} {_UNIT_NAMES[frequency]}"
    else:
        phrase = {
            FrequencyType.DAILY: "every day",
            FrequencyType.WEEKLY: "every week",
            FrequencyType.MONTHLY: "every month",
        }[frequency]
    days = canonical_days(pattern.days_of_week)
    if frequency is FrequencyType.WEEKLY and days:
        phrase = f"{phrase} on {', '.join(days)}"
    return phrase
