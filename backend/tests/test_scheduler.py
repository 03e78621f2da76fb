from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from habitpal.services.scheduling import (
    CivilDateTime,
    FrequencyType,
    HabitOccurrenceRequest,
    InvalidActivity,
    InvalidDuration,
    InvalidRecurrence,
    InvalidTimeOfDay,
    InvalidTimezone,
    RecurrencePattern,
    schedule,
    schedule_single,
)

LA = "America/Los_Angeles"
MONDAY_8AM = datetime(2025, 11, 24, 16, 0, tzinfo=timezone.utc)
THURSDAY_10AM = datetime(2025, 11, 27, 18, 0, tzinfo=timezone.utc)


def _request(**overrides) -> HabitOccurrenceRequest:
    fields = dict(
        activity="meditate",
        start_time_of_day="07:00",
        duration_minutes=30,
        recurrence=RecurrencePattern(FrequencyType.DAILY),
        timezone=LA,
    )
    fields.update(overrides)
    return HabitOccurrenceRequest(**fields)


def test_daily_meditation_end_to_end() -> None:
    occurrence = schedule(_request(), MONDAY_8AM)

    assert occurrence.start == CivilDateTime(2025, 11, 25, 7, 0, weekday=2)
    assert occurrence.end == CivilDateTime(2025, 11, 25, 7, 30, weekday=2)
    assert occurrence.recurrence_rule == ("RRULE:FREQ=DAILY",)
    assert occurrence.timezone == LA
    assert occurrence.summary == "Meditate"
    assert occurrence.description == "Habit tracking for: Meditate"


def test_schedule_is_deterministic() -> None:
    request = _request(recurrence=RecurrencePattern(FrequencyType.WEEKLY, days_of_week=("MO", "WE")))

    assert schedule(request, THURSDAY_10AM) == schedule(request, THURSDAY_10AM)


def test_weekly_days_drive_the_first_occurrence() -> None:
    request = _request(recurrence=RecurrencePattern(FrequencyType.WEEKLY, days_of_week=("MO", "WE")))

    occurrence = schedule(request, THURSDAY_10AM)

    assert occurrence.start == CivilDateTime(2025, 12, 1, 7, 0, weekday=1)
    assert occurrence.recurrence_rule == ("RRULE:FREQ=WEEKLY;BYDAY=MO,WE",)


def test_weekly_without_days_keeps_plain_weekly_rule() -> None:
    request = _request(recurrence=RecurrencePattern(FrequencyType.WEEKLY))

    occurrence = schedule(request, THURSDAY_10AM)

    assert occurrence.start == CivilDateTime(2025, 11, 28, 7, 0, weekday=5)
    assert occurrence.recurrence_rule == ("RRULE:FREQ=WEEKLY",)


def test_biweekly_interval_is_ignored() -> None:
    request = _request(recurrence=RecurrencePattern(FrequencyType.BIWEEKLY, interval=5))

    assert schedule(request, MONDAY_8AM).recurrence_rule == ("RRULE:FREQ=WEEKLY;INTERVAL=2",)


def test_monthly_days_do_not_constrain_start() -> None:
    request = _request(recurrence=RecurrencePattern(FrequencyType.MONTHLY, days_of_week=("FR",)))

    occurrence = schedule(request, MONDAY_8AM)

    assert occurrence.start.day == 25
    assert occurrence.recurrence_rule == ("RRULE:FREQ=MONTHLY",)


def test_no_recurrence_is_single_event() -> None:
    occurrence = schedule(_request(recurrence=None), MONDAY_8AM)

    assert occurrence.recurrence_rule == ()


def test_same_minute_schedules_tomorrow() -> None:
    occurrence = schedule(_request(start_time_of_day="08:00"), MONDAY_8AM)

    assert (occurrence.start.day, occurrence.start.hour) == (25, 8)


def test_late_habit_rolls_end_into_next_month() -> None:
    # Sunday 2025-11-30 10:00 in Los Angeles.
    now = datetime(2025, 11, 30, 18, 0, tzinfo=timezone.utc)

    occurrence = schedule(_request(start_time_of_day="23:45", duration_minutes=30), now)

    assert occurrence.start == CivilDateTime(2025, 11, 30, 23, 45, weekday=0)
    assert occurrence.end == CivilDateTime(2025, 12, 1, 0, 15, weekday=1)


def test_description_and_whitespace_are_kept_clean() -> None:
    occurrence = schedule(
        _request(activity="  evening walk ", description="  Around the park  ", timezone=" Europe/Paris "),
        MONDAY_8AM,
    )

    assert occurrence.summary == "Evening walk"
    assert occurrence.description == "Around the park"
    assert occurrence.timezone == "Europe/Paris"


@pytest.mark.parametrize(
    "overrides, error",
    [
        ({"timezone": "Nowhere/City"}, InvalidTimezone),
        ({"start_time_of_day": "25:00"}, InvalidTimeOfDay),
        ({"start_time_of_day": "seven"}, InvalidTimeOfDay),
        ({"duration_minutes": 0}, InvalidDuration),
        ({"duration_minutes": True}, InvalidDuration),
        ({"activity": "   "}, InvalidActivity),
        ({"recurrence": RecurrencePattern(FrequencyType.WEEKLY, days_of_week=("MON",))}, InvalidRecurrence),
    ],
)
def test_invalid_requests_fail_without_partial_result(overrides: dict, error: type) -> None:
    with pytest.raises(error):
        schedule(_request(**overrides), MONDAY_8AM)


def test_naive_now_is_rejected() -> None:
    with pytest.raises(ValueError):
        schedule(_request(), datetime(2025, 11, 24, 8, 0))


def test_single_event_on_explicit_date() -> None:
    occurrence = schedule_single("do cs188 hw", date(2025, 11, 26), "11:30", LA, duration_minutes=90)

    assert occurrence.start == CivilDateTime(2025, 11, 26, 11, 30, weekday=3)
    assert occurrence.end == CivilDateTime(2025, 11, 26, 13, 0, weekday=3)
    assert occurrence.recurrence_rule == ()
    assert occurrence.summary == "Do cs188 hw"
    assert occurrence.description == "Do cs188 hw"


def test_single_event_rejects_unknown_zone() -> None:
    with pytest.raises(InvalidTimezone):
        schedule_single("workout", date(2025, 11, 26), "11:30", "Atlantis/Capital")


def test_single_event_in_spring_forward_gap() -> None:
    occurrence = schedule_single("call home", date(2025, 3, 9), "02:15", LA, duration_minutes=30)

    assert occurrence.start == CivilDateTime(2025, 3, 9, 3, 15, weekday=0)
    assert occurrence.end == CivilDateTime(2025, 3, 9, 3, 45, weekday=0)
