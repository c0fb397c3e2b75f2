"""
Month grid construction for the rota screen and month-bounded reporting.

The grid is always six Monday-first weeks, so it covers the whole reference
month whichever weekday the 1st falls on. Leading and trailing days from the
neighbouring months are real placement targets; only display de-emphasises them.
"""
import calendar
from datetime import date, timedelta
from typing import List, Optional, Tuple

from rota_engine.services.holidays import HolidayCalendar

GRID_DAYS = 42


def month_bounds(reference: date) -> Tuple[date, date]:
    """First and last civil day of the month containing `reference`."""
    last = calendar.monthrange(reference.year, reference.month)[1]
    return reference.replace(day=1), reference.replace(day=last)


def week_bounds(day: date) -> Tuple[date, date]:
    """Monday..Sunday week containing `day`."""
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)


def build_month_grid(reference: date) -> List[date]:
    first, _ = month_bounds(reference)
    # date.weekday() is already Monday=0
    grid_start = first - timedelta(days=first.weekday())
    return [grid_start + timedelta(days=i) for i in range(GRID_DAYS)]


def grid_bounds(reference: date) -> Tuple[date, date]:
    grid = build_month_grid(reference)
    return grid[0], grid[-1]


def describe_grid(reference: date, jurisdiction: Optional[str] = None) -> List[dict]:
    """Grid days annotated with the flags the rota screen renders."""
    holidays = HolidayCalendar(jurisdiction)
    return [
        {
            "day": day,
            "in_month": day.month == reference.month and day.year == reference.year,
            "is_weekend": day.weekday() >= 5,
            "is_holiday": holidays.is_holiday(day),
        }
        for day in build_month_grid(reference)
    ]
