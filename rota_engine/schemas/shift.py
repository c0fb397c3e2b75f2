from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import date, datetime, time


class ShiftCreate(BaseModel):
    """Schema for placing an employee on a day."""
    employee_id: int
    day: date
    start_time: time
    end_time: time
    break_minutes: int = Field(0, ge=0)
    department: Optional[str] = None
    role: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    published: bool = True


class ShiftMove(BaseModel):
    new_day: date


class ShiftTimeUpdate(BaseModel):
    """Replace start and end; the stored break is kept when omitted."""
    start_time: time
    end_time: time
    break_minutes: Optional[int] = Field(None, ge=0)


class ShiftResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    employee_id: int
    employee_name: str = ""
    shift_date: date
    start_time: datetime
    end_time: datetime
    break_minutes: int
    paid_minutes: int
    department: Optional[str] = None
    role: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    published: bool


class ShiftDeleted(BaseModel):
    id: int
    deleted: bool = True
