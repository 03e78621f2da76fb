"""Normalization of ad-hoc event dates typed by a person.

Only a handful of unambiguous shapes are accepted; anything else is an
error for the caller to surface instead of a guess.
"""
from __future__ import annotations

import re
from datetime import date, datetime

from habitpal.services.scheduling import clock
from habitpal.services.scheduling.civil import MONTH_NAMES, WEEKDAY_NAMES, weekday_from_date
from habitpal.services.scheduling.errors import InvalidEventDate
from habitpal.services.scheduling.occurrence import DAYS_PER_WEEK

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_MONTH_DAY_RE = re.compile(
    r"^(?:(?P<weekday>[a-z]+)\.?,?\s+)?"
    r"(?P<month>[a-z]+)\.?\s+(?P<day>\d{1,2})(?:st|nd|rd|th)?"
    r"(?:,?\s+(?P<year>\d{4}))?$"
)


def _lookup(token: str, names: tuple) -> int | None:
    if len(token) < 3:
        return None
    for index, name in enumerate(names):
        lowered = name.lower()
        if token == lowered or (lowered.startswith(token) and len(token) >= 3):
            return index
    return None


def normalize_event_date(text: str, now: datetime, timezone_name: str) -> date:
    """Resolve ``text`` to a calendar date as seen in ``timezone_name``.

    Accepts ``YYYY-MM-DD``, ``today``, ``tomorrow``, a weekday name (the next
    such day, today included) and ``[Weekday, ]Month Day[, Year]``.
    """
    raw = (text or "").strip()
    if not raw:
        raise InvalidEventDate("date must not be empty")

    if _ISO_DATE_RE.match(raw):
        try:
            return date.fromisoformat(raw)
        except ValueError as exc:
            raise InvalidEventDate(f"'{raw}' is not a valid calendar date") from exc

    today_civil = clock.civil_from_instant(now, timezone_name)
    today = today_civil.date()
    lowered = " ".join(raw.lower().split())

    if lowered == "today":
        return today
    if lowered == "tomorrow":
        return clock.add_days(today_civil, 1, timezone_name).date()

    weekday = _lookup(lowered, WEEKDAY_NAMES)
    if weekday is not None:
        offset = (weekday - today_civil.weekday + DAYS_PER_WEEK) % DAYS_PER_WEEK
        return clock.add_days(today_civil, offset, timezone_name).date()

    match = _MONTH_DAY_RE.match(lowered)
    if not match:
        raise InvalidEventDate(f"Could not understand the date '{raw}'; use YYYY-MM-DD")

    month = _lookup(match.group("month"), MONTH_NAMES)
    if month is None:
        raise InvalidEventDate(f"'{match.group('month')}' is not a month name")

    day_number = int(match.group("day"))
    explicit_year = match.group("year")
    year = int(explicit_year) if explicit_year else today.year
    try:
        resolved = date(year, month + 1, day_number)
        if not explicit_year and resolved < today:
            resolved = date(year + 1, month + 1, day_number)
    except ValueError as exc:
        raise InvalidEventDate(f"'{raw}' is not a valid calendar date") from exc

    weekday_token = match.group("weekday")
    if weekday_token:
        expected = _lookup(weekday_token, WEEKDAY_NAMES)
        if expected is None:
            raise InvalidEventDate(f"'{weekday_token}' is not a weekday name")
        actual = weekday_from_date(resolved)
        if expected != actual:
            raise InvalidEventDate(
                f"{resolved.isoformat()} is a {WEEKDAY_NAMES[actual]}, not a {WEEKDAY_NAMES[expected]}"
            )
    return resolved
