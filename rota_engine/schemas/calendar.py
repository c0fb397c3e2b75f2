from pydantic import BaseModel
from datetime import date
from typing import List

from rota_engine.schemas.shift import ShiftResponse
from rota_engine.schemas.leave import LeaveRequestResponse


class GridDay(BaseModel):
    day: date
    in_month: bool
    is_weekend: bool
    is_holiday: bool


class MonthGridResponse(BaseModel):
    reference: date
    month_start: date
    month_end: date
    days: List[GridDay]


class HolidayListResponse(BaseModel):
    jurisdiction: str
    version: str
    dates: List[date]


class RotaDay(GridDay):
    shifts: List[ShiftResponse] = []
    leave: List[LeaveRequestResponse] = []
    # An employee has both a shift and approved leave on this day
    conflict: bool = False


class MonthRotaResponse(BaseModel):
    reference: date
    grid_start: date
    grid_end: date
    days: List[RotaDay]


class ShiftRangeResponse(BaseModel):
    employee_id: int
    start: date
    end: date
    shifts: List[ShiftResponse]
    total_paid_minutes: int


class YearActivityResponse(BaseModel):
    employee_id: int
    year: int
    shifts: List[ShiftResponse]
    leave: List[LeaveRequestResponse]
    total_paid_hours: float
    approved_leave_days: float
