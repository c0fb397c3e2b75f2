"""
Leave Ledger Service Layer

Stores leave requests and derives balances from them.

Architecture:
- Router -> LeaveLedgerService (this module) -> Models
- Overlap rules are delegated to services.conflicts
- Balances are a projection over approved requests, recomputed on every read;
  nothing here keeps a running total
"""
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from sqlalchemy.orm import Session

from rota_engine.core.config import settings
from rota_engine.core.exceptions import (
    InvalidTimeRangeError,
    InvalidTransitionError,
    NotFoundError,
    OverlappingLeaveConflict,
)
from rota_engine.models.leave_entitlement import LeaveEntitlement
from rota_engine.models.leave_request import LeaveRequest, LeaveStatus, LeaveType
from rota_engine.schemas.leave import (
    LeaveBalanceResponse,
    LeaveEntitlementResponse,
    LeaveRequestDeleted,
    LeaveRequestResponse,
)
from rota_engine.services.base import BaseService, engine_operation
from rota_engine.services.conflicts import has_overlapping_leave, is_on_leave, overlap_clause
from rota_engine.services.directory import get_employee

EDITABLE_FIELDS = {"employee_id", "leave_type", "start_date", "end_date", "reason"}

# Statuses a request may be cancelled from
CANCELLABLE = {LeaveStatus.PENDING.value, LeaveStatus.APPROVED.value, LeaveStatus.DECLINED.value}

DECISIONS = {LeaveStatus.APPROVED.value, LeaveStatus.DECLINED.value}


def inclusive_days(start: date, end: date) -> float:
    """Calendar days in [start, end]; weekends and holidays are counted."""
    return float((end - start).days + 1)


def leave_in_window(
    db: Session,
    company_id: int,
    start: date,
    end: date,
    employee_id: Optional[int] = None,
    statuses: Optional[Iterable[str]] = None
) -> List[LeaveRequest]:
    """Requests whose [start_date, end_date] overlaps [start, end]."""
    query = db.query(LeaveRequest).filter(
        LeaveRequest.company_id == company_id,
        overlap_clause(LeaveRequest.start_date, LeaveRequest.end_date, start, end),
    )
    if employee_id is not None:
        query = query.filter(LeaveRequest.employee_id == employee_id)
    if statuses:
        query = query.filter(LeaveRequest.status.in_(list(statuses)))
    return query.order_by(LeaveRequest.start_date, LeaveRequest.id).all()


def _leave_type_value(leave_type: Union[str, LeaveType]) -> str:
    return LeaveType(leave_type).value


class LeaveLedgerService(BaseService):
    """
    Leave requests, their status machine, and balance projection.

    pending -> approved | declined          (decide)
    pending | approved | declined -> cancelled   (cancel, terminal)
    any -> removed                          (delete, hard)
    """

    def _get_request(self, company_id: int, request_id: int) -> LeaveRequest:
        leave = self.db.query(LeaveRequest).filter(
            LeaveRequest.id == request_id,
            LeaveRequest.company_id == company_id
        ).first()
        if not leave:
            raise NotFoundError("Leave request", request_id)
        return leave

    def _require_employee(self, company_id: int, employee_id: int):
        employee = get_employee(self.db, company_id, employee_id)
        if not employee:
            raise NotFoundError("Employee", employee_id)
        return employee

    @staticmethod
    def _check_range(start: date, end: date):
        if start > end:
            raise InvalidTimeRangeError(
                "Leave cannot end before it starts",
                {"start_date": start.isoformat(), "end_date": end.isoformat()}
            )

    def _check_overlap(self, company_id: int, employee_id: int, start: date, end: date, exclude_id: Optional[int] = None):
        if has_overlapping_leave(self.db, company_id, employee_id, start, end, exclude_id):
            raise OverlappingLeaveConflict(employee_id, start, end)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @engine_operation
    def create_leave_request(
        self,
        company_id: int,
        employee_id: int,
        leave_type: Union[str, LeaveType],
        start_date: date,
        end_date: Optional[date] = None,
        reason: Optional[str] = None,
        created_by: Optional[int] = None
    ) -> LeaveRequestResponse:
        end_date = end_date or start_date
        self._check_range(start_date, end_date)
        self._require_employee(company_id, employee_id)
        self._check_overlap(company_id, employee_id, start_date, end_date)

        leave = LeaveRequest(
            company_id=company_id,
            employee_id=employee_id,
            leave_type=_leave_type_value(leave_type),
            start_date=start_date,
            end_date=end_date,
            duration_days=inclusive_days(start_date, end_date),
            reason=reason or None,
            status=LeaveStatus.PENDING.value,
            created_by=created_by,
        )
        self.db.add(leave)
        self._commit(leave)

        self._logger.info(
            f"Leave request {leave.id} created for employee {employee_id} "
            f"({leave.leave_type} {start_date}..{end_date})"
        )
        self._notify("leave_requests", "insert", company_id, leave.id)
        return LeaveRequestResponse.model_validate(leave)

    @engine_operation
    def edit_leave_request(self, company_id: int, request_id: int, **fields: Any) -> LeaveRequestResponse:
        """
        Admin edit of any request regardless of status. The status itself never
        changes here; a wrong decision is cancelled or edited, not flipped.
        """
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise TypeError(f"Fields not editable: {', '.join(sorted(unknown))}")

        leave = self._get_request(company_id, request_id)

        employee_id = fields.get("employee_id") or leave.employee_id
        start = fields.get("start_date") or leave.start_date
        if "end_date" in fields:
            end = fields["end_date"] or start
        else:
            end = leave.end_date
        leave_type = leave.leave_type
        if fields.get("leave_type") is not None:
            leave_type = _leave_type_value(fields["leave_type"])

        self._check_range(start, end)
        if employee_id != leave.employee_id:
            self._require_employee(company_id, employee_id)
        self._check_overlap(company_id, employee_id, start, end, exclude_id=leave.id)

        leave.employee_id = employee_id
        leave.start_date = start
        leave.end_date = end
        leave.duration_days = inclusive_days(start, end)
        leave.leave_type = leave_type
        if "reason" in fields:
            leave.reason = fields["reason"] or None
        self._commit(leave)

        self._logger.info(f"Leave request {leave.id} edited")
        self._notify("leave_requests", "update", company_id, leave.id)
        return LeaveRequestResponse.model_validate(leave)

    @engine_operation
    def decide(
        self,
        company_id: int,
        request_id: int,
        outcome: Union[str, LeaveStatus],
        decided_by: Optional[int] = None
    ) -> LeaveRequestResponse:
        outcome = LeaveStatus(outcome).value
        if outcome not in DECISIONS:
            raise ValueError(f"Decision must be one of {sorted(DECISIONS)}, got {outcome!r}")

        leave = self._get_request(company_id, request_id)
        if leave.status != LeaveStatus.PENDING.value:
            raise InvalidTransitionError(leave.status, outcome)

        leave.status = outcome
        leave.decided_by = decided_by
        leave.decided_at = datetime.now(timezone.utc)
        self._commit(leave)

        self._logger.info(f"Leave request {leave.id} {outcome} by {decided_by}")
        self._notify("leave_requests", "update", company_id, leave.id)
        return LeaveRequestResponse.model_validate(leave)

    @engine_operation
    def cancel(self, company_id: int, request_id: int, cancelled_by: Optional[int] = None) -> LeaveRequestResponse:
        leave = self._get_request(company_id, request_id)
        if leave.status not in CANCELLABLE:
            raise InvalidTransitionError(leave.status, LeaveStatus.CANCELLED.value)

        leave.status = LeaveStatus.CANCELLED.value
        self._commit(leave)

        self._logger.info(f"Leave request {leave.id} cancelled by {cancelled_by}")
        self._notify("leave_requests", "update", company_id, leave.id)
        return LeaveRequestResponse.model_validate(leave)

    @engine_operation
    def delete(self, company_id: int, request_id: int) -> LeaveRequestDeleted:
        leave = self._get_request(company_id, request_id)
        self.db.delete(leave)
        self._commit()

        self._logger.info(f"Leave request {request_id} deleted")
        self._notify("leave_requests", "delete", company_id, request_id)
        return LeaveRequestDeleted(id=request_id)

    @engine_operation
    def set_entitlement(
        self,
        company_id: int,
        employee_id: int,
        leave_type: Union[str, LeaveType],
        period_start: date,
        period_end: date,
        entitled_days: float
    ) -> LeaveEntitlementResponse:
        if period_start > period_end:
            raise InvalidTimeRangeError(
                "Entitlement period cannot end before it starts",
                {"period_start": period_start.isoformat(), "period_end": period_end.isoformat()}
            )
        self._require_employee(company_id, employee_id)
        leave_type = _leave_type_value(leave_type)

        entitlement = self.db.query(LeaveEntitlement).filter(
            LeaveEntitlement.company_id == company_id,
            LeaveEntitlement.employee_id == employee_id,
            LeaveEntitlement.leave_type == leave_type,
            LeaveEntitlement.period_start == period_start,
        ).first()
        action = "update"
        if not entitlement:
            entitlement = LeaveEntitlement(
                company_id=company_id,
                employee_id=employee_id,
                leave_type=leave_type,
                period_start=period_start,
            )
            self.db.add(entitlement)
            action = "insert"
        entitlement.period_end = period_end
        entitlement.entitled_days = float(entitled_days)
        self._commit(entitlement)

        self._notify("leave_entitlements", action, company_id, entitlement.id)
        return LeaveEntitlementResponse.model_validate(entitlement)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @engine_operation
    def get_request(self, company_id: int, request_id: int) -> LeaveRequestResponse:
        return LeaveRequestResponse.model_validate(self._get_request(company_id, request_id))

    @engine_operation
    def list_requests(
        self,
        company_id: int,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
        status: Optional[Union[str, LeaveStatus]] = None
    ) -> List[LeaveRequestResponse]:
        self._check_range(start, end)
        statuses = [LeaveStatus(status).value] if status else None
        rows = leave_in_window(self.db, company_id, start, end, employee_id, statuses)
        return [LeaveRequestResponse.model_validate(r) for r in rows]

    @engine_operation
    def on_leave(self, company_id: int, employee_id: int, day: date) -> bool:
        return is_on_leave(self.db, company_id, employee_id, day)

    def _check_period(self, company_id: int, employee_id: int, period_start: date, period_end: date):
        if period_start > period_end:
            raise InvalidTimeRangeError(
                "Balance period cannot end before it starts",
                {"period_start": period_start.isoformat(), "period_end": period_end.isoformat()}
            )
        self._require_employee(company_id, employee_id)

    def _balance(self, company_id: int, employee_id: int, leave_type: str, period_start: date, period_end: date) -> LeaveBalanceResponse:
        entitled = self._entitled_days(company_id, employee_id, leave_type, period_start, period_end)
        taken = self._taken_days(company_id, employee_id, leave_type, period_start, period_end)
        return LeaveBalanceResponse(
            employee_id=employee_id,
            leave_type=leave_type,
            period_start=period_start,
            period_end=period_end,
            entitled=entitled,
            taken=taken,
            balance=entitled - taken,
        )

    @engine_operation
    def compute_balance(
        self,
        company_id: int,
        employee_id: int,
        leave_type: Union[str, LeaveType],
        period_start: date,
        period_end: date
    ) -> LeaveBalanceResponse:
        """
        entitled - taken for one employee/leave type/period.

        Only approved requests count towards `taken`, each with its full
        duration_days when it overlaps the period. The balance is reported
        as-is, including negative values.
        """
        self._check_period(company_id, employee_id, period_start, period_end)
        return self._balance(company_id, employee_id, _leave_type_value(leave_type), period_start, period_end)

    @engine_operation
    def balances_for(self, company_id: int, employee_id: int, period_start: date, period_end: date) -> Dict[str, LeaveBalanceResponse]:
        """Balance for every leave type over one period."""
        self._check_period(company_id, employee_id, period_start, period_end)
        return {
            leave_type.value: self._balance(company_id, employee_id, leave_type.value, period_start, period_end)
            for leave_type in LeaveType
        }

    def _entitled_days(self, company_id: int, employee_id: int, leave_type: str, start: date, end: date) -> float:
        rows = self.db.query(LeaveEntitlement).filter(
            LeaveEntitlement.company_id == company_id,
            LeaveEntitlement.employee_id == employee_id,
            LeaveEntitlement.leave_type == leave_type,
            overlap_clause(LeaveEntitlement.period_start, LeaveEntitlement.period_end, start, end),
        ).all()
        if not rows:
            return settings.leave.default_for(leave_type)
        return float(sum(r.entitled_days for r in rows))

    def _taken_days(self, company_id: int, employee_id: int, leave_type: str, start: date, end: date) -> float:
        approved = leave_in_window(
            self.db, company_id, start, end, employee_id, [LeaveStatus.APPROVED.value]
        )
        return float(sum(r.duration_days for r in approved if r.leave_type == leave_type))
