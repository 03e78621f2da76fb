"""Timezone clock: the only bridge between instants and civil time."""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from habitpal.services.scheduling.civil import CivilDateTime
from habitpal.services.scheduling.errors import InvalidTimezone

# Local noon is far enough from midnight that a DST shift never changes the date.
_PROJECTION_HOUR = 12


def resolve_timezone(timezone_name: str) -> ZoneInfo:
    """Return the IANA zone for ``timezone_name`` or raise InvalidTimezone."""
    if not isinstance(timezone_name, str) or not timezone_name.strip():
        raise InvalidTimezone("timezone must be a non-empty IANA zone name")
    try:
        return ZoneInfo(timezone_name.strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidTimezone(f"Unknown timezone '{timezone_name}'") from exc


def civil_from_instant(instant: datetime, timezone_name: str) -> CivilDateTime:
    """Read the wall clock of ``timezone_name`` at an absolute instant."""
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise ValueError("instant must be timezone-aware")
    zone = resolve_timezone(timezone_name)
    return CivilDateTime.from_datetime(instant.astimezone(zone))


def instant_from_civil(civil: CivilDateTime, timezone_name: str) -> datetime:
    """Return the UTC instant a civil time denotes in ``timezone_name``.

    Wall times skipped by a DST jump use the offset in force before the jump;
    repeated wall times resolve to their first occurrence.
    """
    zone = resolve_timezone(timezone_name)
    local = datetime(civil.year, civil.month, civil.day, civil.hour, civil.minute, tzinfo=zone)
    return local.astimezone(timezone.utc)


def civil_at(day: date, hour: int, minute: int, timezone_name: str) -> CivilDateTime:
    """Civil time for an explicit calendar date in a validated zone."""
    civil = CivilDateTime.from_datetime(datetime.combine(day, time(hour, minute)))
    return resolve_wall_time(civil, timezone_name)


def resolve_wall_time(civil: CivilDateTime, timezone_name: str) -> CivilDateTime:
    """Return the wall time the zone actually shows for ``civil``.

    Existing wall times come back unchanged; a time skipped by a DST jump
    moves forward by the size of the jump (02:30 becomes 03:30).
    """
    return civil_from_instant(instant_from_civil(civil, timezone_name), timezone_name)


def add_days(civil: CivilDateTime, days: int, timezone_name: str) -> CivilDateTime:
    """Move ``civil`` by whole calendar days, keeping its wall time."""
    if days == 0:
        return civil
    noon = instant_from_civil(civil.at(_PROJECTION_HOUR, 0), timezone_name)
    projected = civil_from_instant(noon + timedelta(days=days), timezone_name)
    return projected.at(civil.hour, civil.minute)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)
