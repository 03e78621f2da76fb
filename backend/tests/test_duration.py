from __future__ import annotations

import pytest

from habitpal.services.scheduling import clock
from habitpal.services.scheduling.civil import CivilDateTime
from habitpal.services.scheduling.duration import add_minutes
from habitpal.services.scheduling.errors import InvalidDuration

LA = "America/Los_Angeles"


def test_minutes_within_the_same_day() -> None:
    start = CivilDateTime(2025, 11, 25, 7, 0, weekday=2)

    assert add_minutes(start, 30, LA) == CivilDateTime(2025, 11, 25, 7, 30, weekday=2)


def test_rollover_past_midnight() -> None:
    start = CivilDateTime(2025, 11, 24, 23, 45, weekday=1)

    assert add_minutes(start, 30, LA) == CivilDateTime(2025, 11, 25, 0, 15, weekday=2)


def test_rollover_at_month_and_year_end() -> None:
    start = CivilDateTime(2025, 12, 31, 23, 45, weekday=3)

    assert add_minutes(start, 30, LA) == CivilDateTime(2026, 1, 1, 0, 15, weekday=4)


def test_rollover_into_leap_day() -> None:
    start = CivilDateTime(2024, 2, 28, 23, 30, weekday=3)

    assert add_minutes(start, 60, LA) == CivilDateTime(2024, 2, 29, 0, 30, weekday=4)


def test_rollover_into_march_in_common_year() -> None:
    start = CivilDateTime(2025, 2, 28, 23, 30, weekday=5)

    assert add_minutes(start, 60, LA) == CivilDateTime(2025, 3, 1, 0, 30, weekday=6)


def test_multi_day_duration() -> None:
    start = CivilDateTime(2025, 11, 24, 23, 0, weekday=1)

    assert add_minutes(start, 1500, LA) == CivilDateTime(2025, 11, 26, 0, 0, weekday=3)


def test_zero_minutes_is_identity() -> None:
    start = CivilDateTime(2025, 11, 24, 23, 0, weekday=1)

    assert add_minutes(start, 0, LA) == start


def test_negative_minutes_rejected() -> None:
    with pytest.raises(InvalidDuration):
        add_minutes(CivilDateTime(2025, 11, 24, 23, 0, weekday=1), -5, LA)


@pytest.mark.parametrize(
    "start, minutes",
    [
        (CivilDateTime(2025, 11, 24, 23, 45, weekday=1), 30),
        (CivilDateTime(2025, 12, 31, 23, 45, weekday=3), 30),
        (CivilDateTime(2025, 3, 8, 22, 0, weekday=6), 300),
        (CivilDateTime(2025, 11, 1, 23, 0, weekday=6), 150),
        (CivilDateTime(2025, 3, 9, 1, 45, weekday=0), 45),
    ],
)
def test_projected_time_round_trips_through_clock(start: CivilDateTime, minutes: int) -> None:
    end = add_minutes(start, minutes, LA)

    instant = clock.instant_from_civil(end, LA)

    assert clock.civil_from_instant(instant, LA) == end


def test_end_in_spring_forward_gap_moves_past_the_jump() -> None:
    start = CivilDateTime(2025, 3, 9, 1, 45, weekday=0)

    assert add_minutes(start, 45, LA) == CivilDateTime(2025, 3, 9, 3, 30, weekday=0)
