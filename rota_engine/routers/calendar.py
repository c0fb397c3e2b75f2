from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from rota_engine.schemas.calendar import GridDay, HolidayListResponse, MonthGridResponse
from rota_engine.services.calendar_grid import describe_grid, month_bounds
from rota_engine.services.holidays import HolidayCalendar

router = APIRouter(prefix="/calendar", tags=["Calendar"])


@router.get("/grid", response_model=MonthGridResponse)
def month_grid(
    reference: Optional[date] = None,
    jurisdiction: Optional[str] = None
):
    """The 6-week Monday-first grid for the month containing `reference` (default: today)."""
    reference = reference or date.today()
    month_start, month_end = month_bounds(reference)
    return MonthGridResponse(
        reference=reference,
        month_start=month_start,
        month_end=month_end,
        days=[GridDay(**cell) for cell in describe_grid(reference, jurisdiction)],
    )


@router.get("/holidays", response_model=HolidayListResponse)
def list_holidays(
    start: date = Query(...),
    end: date = Query(...),
    jurisdiction: Optional[str] = None
):
    if start > end:
        raise HTTPException(status_code=422, detail="start must not be after end")
    calendar = HolidayCalendar(jurisdiction)
    return HolidayListResponse(
        jurisdiction=calendar.jurisdiction,
        version=calendar.version,
        dates=calendar.holidays_between(start, end),
    )
