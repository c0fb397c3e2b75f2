"""
Shift Placement Engine

Validates and commits creation, moves, time edits and deletion of shift
assignments. Every call re-reads the conflicting rows before its single write,
so no state is trusted between calls.

Placement checks run in a fixed order and the first failure wins:
    1. holiday
    2. duplicate assignment for (employee, day)
    3. pending/approved leave covering the day
Nothing is written unless all of them pass.
"""
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple, Union

from sqlalchemy.exc import IntegrityError

from rota_engine.core.exceptions import (
    DuplicateAssignmentConflict,
    HolidayConflict,
    InvalidTimeRangeError,
    NotFoundError,
    OnLeaveConflict,
)
from rota_engine.models.shift import Shift
from rota_engine.schemas.shift import ShiftDeleted, ShiftResponse
from rota_engine.services.base import BaseService, engine_operation
from rota_engine.services.conflicts import has_assignment_on_day, is_on_leave
from rota_engine.services.directory import get_employee
from rota_engine.services.holidays import HolidayCalendar

TimeInput = Union[str, time, datetime]

ONE_DAY = timedelta(days=1)


def _civil(value: TimeInput, field: str) -> Union[time, datetime]:
    """Parse a caller-supplied time; seconds and tzinfo are dropped."""
    if isinstance(value, str):
        try:
            value = time.fromisoformat(value)
        except ValueError:
            raise InvalidTimeRangeError(f"Invalid {field}: {value!r}", {field: value})
    return value.replace(second=0, microsecond=0, tzinfo=None)


def resolve_shift_window(day: date, start: time, end: time) -> Tuple[datetime, datetime]:
    """
    Anchor both times to `day`. An end that is not after the start is an
    overnight shift and rolls to the next day; this is the only rollover rule.
    """
    start_dt = datetime.combine(day, start)
    end_dt = datetime.combine(day, end)
    if end_dt <= start_dt:
        end_dt += ONE_DAY
    return start_dt, end_dt


def build_shift_window(day: date, start_time: TimeInput, end_time: TimeInput) -> Tuple[datetime, datetime]:
    """
    Plain times go through the rollover rule. A datetime is taken as given:
    a start must sit on `day`, and an explicit end must fall after the start
    and at most 24 hours later.
    """
    start = _civil(start_time, "start_time")
    end = _civil(end_time, "end_time")

    if isinstance(start, datetime):
        if start.date() != day:
            raise InvalidTimeRangeError(
                "start_time falls outside the shift's day",
                {"start_time": start.isoformat(), "day": day.isoformat()}
            )
        start = start.time()

    if not isinstance(end, datetime):
        return resolve_shift_window(day, start, end)

    start_dt = datetime.combine(day, start)
    if end <= start_dt or end - start_dt > ONE_DAY:
        raise InvalidTimeRangeError(
            "Shift must end after it starts and last at most 24 hours",
            {"start_time": start_dt.isoformat(), "end_time": end.isoformat()}
        )
    return start_dt, end


def moved_window(start: datetime, end: datetime, new_day: date) -> Tuple[datetime, datetime]:
    """
    New start keeps the start time-of-day; duration is taken from the stored
    timestamps, never from display times, so a rolled-over end cannot drift.
    """
    duration = end - start
    if duration <= timedelta(0):
        duration += ONE_DAY
    new_start = datetime.combine(new_day, start.time())
    return new_start, new_start + duration


def _check_break(start: datetime, end: datetime, break_minutes: int):
    gross = int((end - start).total_seconds() // 60)
    if break_minutes < 0 or break_minutes >= gross:
        raise InvalidTimeRangeError(
            "Break must be shorter than the shift",
            {"break_minutes": break_minutes, "shift_minutes": gross}
        )


class ShiftPlacementService(BaseService):

    def __init__(self, db, feed=None, holidays: Optional[HolidayCalendar] = None):
        super().__init__(db, feed)
        self.holidays = holidays or HolidayCalendar()

    def _get_shift(self, company_id: int, shift_id: int) -> Shift:
        shift = self.db.query(Shift).filter(
            Shift.id == shift_id,
            Shift.company_id == company_id
        ).first()
        if not shift:
            raise NotFoundError("Shift", shift_id)
        return shift

    def _check_placement(self, company_id: int, employee_id: int, day: date, exclude_id: Optional[int] = None):
        if self.holidays.is_holiday(day):
            raise HolidayConflict(day)
        if has_assignment_on_day(self.db, company_id, employee_id, day, exclude_id):
            raise DuplicateAssignmentConflict(employee_id, day)
        if is_on_leave(self.db, company_id, employee_id, day):
            raise OnLeaveConflict(employee_id, day)

    def _commit_placement(self, shift: Shift):
        employee_id, day = shift.employee_id, shift.shift_date
        try:
            self._commit(shift)
        except IntegrityError:
            # Another admin placed the same employee on this day after our read
            raise DuplicateAssignmentConflict(employee_id, day, {"race": True})

    @engine_operation
    def create_shift(
        self,
        company_id: int,
        employee_id: int,
        day: date,
        start_time: TimeInput,
        end_time: TimeInput,
        break_minutes: int = 0,
        department: Optional[str] = None,
        role: Optional[str] = None,
        location: Optional[str] = None,
        notes: Optional[str] = None,
        published: bool = True
    ) -> ShiftResponse:
        employee = get_employee(self.db, company_id, employee_id)
        if not employee:
            raise NotFoundError("Employee", employee_id)

        self._check_placement(company_id, employee_id, day)

        start_dt, end_dt = build_shift_window(day, start_time, end_time)
        _check_break(start_dt, end_dt, break_minutes)

        shift = Shift(
            company_id=company_id,
            employee_id=employee_id,
            shift_date=day,
            start_time=start_dt,
            end_time=end_dt,
            break_minutes=break_minutes,
            department=department or employee.department,
            role=role,
            location=location,
            notes=notes,
            published=published,
        )
        self.db.add(shift)
        self._commit_placement(shift)

        self._logger.info(f"Shift {shift.id} placed: employee {employee_id} on {day}")
        self._notify("shifts", "insert", company_id, shift.id)
        return ShiftResponse.model_validate(shift)

    @engine_operation
    def move_shift(self, company_id: int, shift_id: int, new_day: date) -> ShiftResponse:
        shift = self._get_shift(company_id, shift_id)
        self._check_placement(company_id, shift.employee_id, new_day, exclude_id=shift.id)

        old_day = shift.shift_date
        shift.start_time, shift.end_time = moved_window(shift.start_time, shift.end_time, new_day)
        shift.shift_date = new_day
        self._commit_placement(shift)

        self._logger.info(f"Shift {shift.id} moved from {old_day} to {new_day}")
        self._notify("shifts", "update", company_id, shift.id)
        return ShiftResponse.model_validate(shift)

    @engine_operation
    def edit_shift_time(
        self,
        company_id: int,
        shift_id: int,
        start_time: TimeInput,
        end_time: TimeInput,
        break_minutes: Optional[int] = None
    ) -> ShiftResponse:
        """
        Replace start/end/break while the day stays fixed. Holiday, leave and
        duplicate checks are not repeated because the day does not change.
        """
        shift = self._get_shift(company_id, shift_id)
        day = shift.shift_date
        if break_minutes is None:
            break_minutes = shift.break_minutes

        start_dt, end_dt = build_shift_window(day, start_time, end_time)
        _check_break(start_dt, end_dt, break_minutes)

        shift.start_time = start_dt
        shift.end_time = end_dt
        shift.break_minutes = break_minutes
        self._commit(shift)

        self._logger.info(f"Shift {shift.id} retimed to {start_dt:%H:%M}-{end_dt:%H:%M}")
        self._notify("shifts", "update", company_id, shift.id)
        return ShiftResponse.model_validate(shift)

    @engine_operation
    def delete_shift(self, company_id: int, shift_id: int) -> ShiftDeleted:
        shift = self._get_shift(company_id, shift_id)
        self.db.delete(shift)
        self._commit()

        self._logger.info(f"Shift {shift_id} deleted")
        self._notify("shifts", "delete", company_id, shift_id)
        return ShiftDeleted(id=shift_id)

    @engine_operation
    def get_shift(self, company_id: int, shift_id: int) -> ShiftResponse:
        return ShiftResponse.model_validate(self._get_shift(company_id, shift_id))
