"""
Read-side projections of the rota.

Viewers call these after every change notification and rebuild from scratch;
nothing is cached between calls.
"""
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional

from rota_engine.core.exceptions import InvalidTimeRangeError, NotFoundError
from rota_engine.models.employee import Employee
from rota_engine.models.leave_request import LeaveRequest, LeaveStatus
from rota_engine.models.shift import Shift
from rota_engine.schemas.calendar import MonthRotaResponse, RotaDay, ShiftRangeResponse, YearActivityResponse
from rota_engine.schemas.leave import LeaveRequestResponse
from rota_engine.schemas.shift import ShiftResponse
from rota_engine.services.base import BaseService, engine_operation
from rota_engine.services.calendar_grid import describe_grid
from rota_engine.services.conflicts import date_ranges_overlap
from rota_engine.services.directory import get_employee
from rota_engine.services.holidays import HolidayCalendar
from rota_engine.services.leave_ledger import leave_in_window


class RotaViewService(BaseService):

    def __init__(self, db, feed=None, holidays: Optional[HolidayCalendar] = None):
        super().__init__(db, feed)
        self.holidays = holidays or HolidayCalendar()

    def _shifts_between(
        self,
        company_id: int,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
        department: Optional[str] = None
    ) -> List[Shift]:
        query = self.db.query(Shift).filter(
            Shift.company_id == company_id,
            Shift.shift_date >= start,
            Shift.shift_date <= end,
        )
        if employee_id is not None:
            query = query.filter(Shift.employee_id == employee_id)
        if department:
            query = query.join(Employee, Shift.employee_id == Employee.id).filter(Employee.department == department)
        return query.order_by(Shift.start_time, Shift.id).all()

    def _require_employee(self, company_id: int, employee_id: int):
        if not get_employee(self.db, company_id, employee_id):
            raise NotFoundError("Employee", employee_id)

    @engine_operation
    def month_rota(
        self,
        company_id: int,
        reference: date,
        employee_id: Optional[int] = None,
        department: Optional[str] = None
    ) -> MonthRotaResponse:
        """
        Every one of the 42 grid days with its shifts and approved leave.
        Shifts are loaded for the whole grid, not just the reference month,
        because the out-of-month cells are placement targets too.
        """
        cells = describe_grid(reference, self.holidays.jurisdiction)
        grid_start, grid_end = cells[0]["day"], cells[-1]["day"]

        shifts_by_day: Dict[date, List[Shift]] = defaultdict(list)
        for shift in self._shifts_between(company_id, grid_start, grid_end, employee_id, department):
            shifts_by_day[shift.shift_date].append(shift)

        leave = leave_in_window(
            self.db, company_id, grid_start, grid_end, employee_id, [LeaveStatus.APPROVED.value]
        )
        if department:
            leave = [r for r in leave if r.employee and r.employee.department == department]

        days = []
        for cell in cells:
            day = cell["day"]
            day_shifts = shifts_by_day.get(day, [])
            day_leave = [r for r in leave if date_ranges_overlap(r.start_date, r.end_date, day, day)]
            on_leave = {r.employee_id for r in day_leave}
            days.append(RotaDay(
                **cell,
                shifts=[ShiftResponse.model_validate(s) for s in day_shifts],
                leave=[LeaveRequestResponse.model_validate(r) for r in day_leave],
                conflict=any(s.employee_id in on_leave for s in day_shifts),
            ))

        return MonthRotaResponse(reference=reference, grid_start=grid_start, grid_end=grid_end, days=days)

    @engine_operation
    def shifts_in_range(self, company_id: int, employee_id: int, start: date, end: date) -> ShiftRangeResponse:
        """Shifts starting within [start, end] for one employee, as used by rota exports."""
        if start > end:
            raise InvalidTimeRangeError("Range cannot end before it starts")
        self._require_employee(company_id, employee_id)

        shifts = self._shifts_between(company_id, start, end, employee_id)
        return ShiftRangeResponse(
            employee_id=employee_id,
            start=start,
            end=end,
            shifts=[ShiftResponse.model_validate(s) for s in shifts],
            total_paid_minutes=sum(s.paid_minutes for s in shifts),
        )

    @engine_operation
    def employee_year_activity(self, company_id: int, employee_id: int, year: int) -> YearActivityResponse:
        self._require_employee(company_id, employee_id)
        year_start, year_end = date(year, 1, 1), date(year, 12, 31)

        shifts = self._shifts_between(company_id, year_start, year_end, employee_id)
        leave = self.db.query(LeaveRequest).filter(
            LeaveRequest.company_id == company_id,
            LeaveRequest.employee_id == employee_id,
            LeaveRequest.start_date >= year_start,
            LeaveRequest.start_date <= year_end,
        ).order_by(LeaveRequest.start_date).all()

        return YearActivityResponse(
            employee_id=employee_id,
            year=year,
            shifts=[ShiftResponse.model_validate(s) for s in shifts],
            leave=[LeaveRequestResponse.model_validate(r) for r in leave],
            total_paid_hours=round(sum(s.paid_minutes for s in shifts) / 60, 2),
            approved_leave_days=sum(
                r.duration_days for r in leave if r.status == LeaveStatus.APPROVED.value
            ),
        )
