"""
Conflict Validator

Single home of the overlap and duplicate-assignment rules. Both the Leave
Ledger and the Shift Placement Engine call into this module; neither compares
date ranges or shift days on its own.

- date_ranges_overlap: inclusive civil-date overlap, as a pure predicate
- overlap_clause: the same predicate expressed as a SQL filter
- has_assignment_on_day: one shift per employee per calendar day
"""
from datetime import date
from typing import Optional

from sqlalchemy import and_
from sqlalchemy.orm import Session

from rota_engine.models.leave_request import LeaveRequest, ACTIVE_STATUSES
from rota_engine.models.shift import Shift


def date_ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    return a_start <= b_end and b_start <= a_end


def overlap_clause(start_column, end_column, start: date, end: date):
    """SQL form of date_ranges_overlap for a [start_column, end_column] row."""
    return and_(start_column <= end, end_column >= start)


def has_assignment_on_day(
    db: Session,
    company_id: int,
    employee_id: int,
    day: date,
    exclude_id: Optional[int] = None
) -> bool:
    query = db.query(Shift.id).filter(
        Shift.company_id == company_id,
        Shift.employee_id == employee_id,
        Shift.shift_date == day,
    )
    if exclude_id is not None:
        query = query.filter(Shift.id != exclude_id)
    return db.query(query.exists()).scalar()


def active_leave_query(
    db: Session,
    company_id: int,
    employee_id: int,
    start: date,
    end: date,
    exclude_id: Optional[int] = None
):
    """Pending/approved requests of one employee that overlap [start, end]."""
    query = db.query(LeaveRequest).filter(
        LeaveRequest.company_id == company_id,
        LeaveRequest.employee_id == employee_id,
        LeaveRequest.status.in_(ACTIVE_STATUSES),
        overlap_clause(LeaveRequest.start_date, LeaveRequest.end_date, start, end),
    )
    if exclude_id is not None:
        query = query.filter(LeaveRequest.id != exclude_id)
    return query


def has_overlapping_leave(
    db: Session,
    company_id: int,
    employee_id: int,
    start: date,
    end: date,
    exclude_id: Optional[int] = None
) -> bool:
    query = active_leave_query(db, company_id, employee_id, start, end, exclude_id)
    return db.query(query.exists()).scalar()


def is_on_leave(db: Session, company_id: int, employee_id: int, day: date) -> bool:
    """True if a pending or approved request covers `day`."""
    return has_overlapping_leave(db, company_id, employee_id, day, day)
