from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends

from rota_engine.dependencies import (
    Actor,
    check_employee_access,
    get_actor,
    get_leave_service,
    require_admin,
    unwrap,
)
from rota_engine.models.leave_request import LeaveStatus, LeaveType
from rota_engine.schemas.leave import (
    LeaveBalanceResponse,
    LeaveDecision,
    LeaveEntitlementResponse,
    LeaveEntitlementUpsert,
    LeaveRequestCreate,
    LeaveRequestDeleted,
    LeaveRequestResponse,
    LeaveRequestUpdate,
)
from rota_engine.services.leave_ledger import LeaveLedgerService

router = APIRouter(prefix="/leave", tags=["Leave"])


@router.post("/requests", response_model=LeaveRequestResponse)
def create_leave_request(
    payload: LeaveRequestCreate,
    actor: Actor = Depends(get_actor),
    service: LeaveLedgerService = Depends(get_leave_service)
):
    check_employee_access(actor, payload.employee_id)
    result = service.create_leave_request(
        actor.company_id,
        payload.employee_id,
        payload.leave_type,
        payload.start_date,
        payload.end_date,
        payload.reason,
        created_by=actor.actor_id,
    )
    return unwrap(result)


@router.put("/requests/{request_id}", response_model=LeaveRequestResponse)
def edit_leave_request(
    request_id: int,
    payload: LeaveRequestUpdate,
    actor: Actor = Depends(require_admin),
    service: LeaveLedgerService = Depends(get_leave_service)
):
    fields = payload.model_dump(exclude_unset=True)
    return unwrap(service.edit_leave_request(actor.company_id, request_id, **fields))


@router.post("/requests/{request_id}/decision", response_model=LeaveRequestResponse)
def decide_leave_request(
    request_id: int,
    payload: LeaveDecision,
    actor: Actor = Depends(require_admin),
    service: LeaveLedgerService = Depends(get_leave_service)
):
    return unwrap(service.decide(actor.company_id, request_id, payload.outcome, decided_by=actor.actor_id))


@router.post("/requests/{request_id}/cancel", response_model=LeaveRequestResponse)
def cancel_leave_request(
    request_id: int,
    actor: Actor = Depends(require_admin),
    service: LeaveLedgerService = Depends(get_leave_service)
):
    return unwrap(service.cancel(actor.company_id, request_id, cancelled_by=actor.actor_id))


@router.delete("/requests/{request_id}", response_model=LeaveRequestDeleted)
def delete_leave_request(
    request_id: int,
    actor: Actor = Depends(require_admin),
    service: LeaveLedgerService = Depends(get_leave_service)
):
    return unwrap(service.delete(actor.company_id, request_id))


@router.get("/requests", response_model=List[LeaveRequestResponse])
def list_leave_requests(
    start: date,
    end: date,
    employee_id: Optional[int] = None,
    status: Optional[LeaveStatus] = None,
    actor: Actor = Depends(get_actor),
    service: LeaveLedgerService = Depends(get_leave_service)
):
    if not actor.is_admin:
        employee_id = actor.actor_id
        check_employee_access(actor, employee_id)
    return unwrap(service.list_requests(actor.company_id, start, end, employee_id, status))


@router.get("/requests/{request_id}", response_model=LeaveRequestResponse)
def get_leave_request(
    request_id: int,
    actor: Actor = Depends(get_actor),
    service: LeaveLedgerService = Depends(get_leave_service)
):
    leave = unwrap(service.get_request(actor.company_id, request_id))
    check_employee_access(actor, leave.employee_id)
    return leave


@router.get("/balance", response_model=LeaveBalanceResponse)
def get_leave_balance(
    employee_id: int,
    period_start: date,
    period_end: date,
    leave_type: LeaveType = LeaveType.ANNUAL,
    actor: Actor = Depends(get_actor),
    service: LeaveLedgerService = Depends(get_leave_service)
):
    check_employee_access(actor, employee_id)
    return unwrap(service.compute_balance(actor.company_id, employee_id, leave_type, period_start, period_end))


@router.get("/balances", response_model=Dict[str, LeaveBalanceResponse])
def get_leave_balances(
    employee_id: int,
    period_start: date,
    period_end: date,
    actor: Actor = Depends(get_actor),
    service: LeaveLedgerService = Depends(get_leave_service)
):
    check_employee_access(actor, employee_id)
    return unwrap(service.balances_for(actor.company_id, employee_id, period_start, period_end))


@router.put("/entitlements", response_model=LeaveEntitlementResponse)
def set_leave_entitlement(
    payload: LeaveEntitlementUpsert,
    actor: Actor = Depends(require_admin),
    service: LeaveLedgerService = Depends(get_leave_service)
):
    result = service.set_entitlement(
        actor.company_id,
        payload.employee_id,
        payload.leave_type,
        payload.period_start,
        payload.period_end,
        payload.entitled_days,
    )
    return unwrap(result)
