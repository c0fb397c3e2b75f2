from pydantic import BaseModel, ConfigDict, Field, model_validator
from datetime import date, datetime
from typing import Literal, Optional

from rota_engine.models.leave_request import LeaveType


class LeaveRequestCreate(BaseModel):
    employee_id: int
    leave_type: LeaveType = LeaveType.ANNUAL
    start_date: date
    end_date: Optional[date] = None  # Single-day request when omitted
    reason: Optional[str] = None


class LeaveRequestUpdate(BaseModel):
    """Admin edit; only the provided fields change."""
    employee_id: Optional[int] = None
    leave_type: Optional[LeaveType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[str] = None


class LeaveDecision(BaseModel):
    outcome: Literal["approved", "declined"]


class LeaveRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    employee_id: int
    employee_name: str = ""
    leave_type: str
    start_date: date
    end_date: date
    duration_days: float
    reason: Optional[str] = None
    status: str
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None


class LeaveRequestDeleted(BaseModel):
    id: int
    deleted: bool = True


class LeaveBalanceResponse(BaseModel):
    employee_id: int
    leave_type: str
    period_start: date
    period_end: date
    entitled: float
    taken: float
    balance: float


class LeaveEntitlementUpsert(BaseModel):
    employee_id: int
    leave_type: LeaveType
    period_start: date
    period_end: date
    entitled_days: float = Field(..., ge=0)

    @model_validator(mode="after")
    def check_period(self):
        if self.period_start > self.period_end:
            raise ValueError("period_start must not be after period_end")
        return self


class LeaveEntitlementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_id: int
    leave_type: str
    period_start: date
    period_end: date
    entitled_days: float
