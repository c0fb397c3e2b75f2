from datetime import date, timedelta

import pytest

from rota_engine.services.calendar_grid import (
    build_month_grid,
    describe_grid,
    grid_bounds,
    month_bounds,
    week_bounds,
)


def _every_day(start: date, end: date):
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def test_grid_shape_holds_for_every_day_of_three_years():
    for day in _every_day(date(2024, 1, 1), date(2026, 12, 31)):
        grid = build_month_grid(day)
        first, last = month_bounds(day)
        assert len(grid) == 42
        assert grid[0].weekday() == 0
        assert grid[-1].weekday() == 6
        assert all(b - a == timedelta(days=1) for a, b in zip(grid, grid[1:]))
        assert first in grid and last in grid


def test_month_starting_on_monday_has_no_leading_days():
    # September 2025 starts on a Monday
    grid = build_month_grid(date(2025, 9, 17))
    assert grid[0] == date(2025, 9, 1)
    assert grid[-1] == date(2025, 10, 12)


def test_month_starting_on_sunday_has_six_leading_days():
    # June 2025 starts on a Sunday
    grid = build_month_grid(date(2025, 6, 30))
    assert grid[0] == date(2025, 5, 26)
    assert grid[6] == date(2025, 6, 1)


def test_grid_is_restartable():
    assert build_month_grid(date(2024, 2, 29)) == build_month_grid(date(2024, 2, 29))
    assert build_month_grid(date(2024, 2, 1)) == build_month_grid(date(2024, 2, 29))


@pytest.mark.parametrize("day, expected", [
    (date(2025, 6, 11), (date(2025, 6, 9), date(2025, 6, 15))),
    (date(2025, 6, 9), (date(2025, 6, 9), date(2025, 6, 15))),
    (date(2025, 6, 15), (date(2025, 6, 9), date(2025, 6, 15))),
])
def test_week_bounds_are_monday_to_sunday(day, expected):
    assert week_bounds(day) == expected


def test_describe_grid_flags():
    cells = describe_grid(date(2025, 12, 1), "GB-ENG")
    by_day = {c["day"]: c for c in cells}
    assert grid_bounds(date(2025, 12, 1)) == (cells[0]["day"], cells[-1]["day"])
    assert by_day[date(2025, 12, 25)]["is_holiday"]
    assert by_day[date(2025, 12, 27)]["is_weekend"]
    assert not by_day[date(2025, 12, 1)]["is_weekend"]
    # Trailing January days are shown but flagged as outside the month
    assert by_day[date(2026, 1, 1)]["in_month"] is False
    assert by_day[date(2026, 1, 1)]["is_holiday"]
