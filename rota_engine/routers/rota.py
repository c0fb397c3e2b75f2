from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends

from rota_engine.dependencies import (
    Actor,
    check_employee_access,
    get_actor,
    get_rota_view,
    get_shift_service,
    require_admin,
    unwrap,
)
from rota_engine.schemas.calendar import MonthRotaResponse, ShiftRangeResponse, YearActivityResponse
from rota_engine.schemas.shift import ShiftCreate, ShiftDeleted, ShiftMove, ShiftResponse, ShiftTimeUpdate
from rota_engine.services.rota_view import RotaViewService
from rota_engine.services.shift_placement import ShiftPlacementService

router = APIRouter(prefix="/rota", tags=["Rota"])


@router.post("/shifts", response_model=ShiftResponse)
def create_shift(
    payload: ShiftCreate,
    actor: Actor = Depends(require_admin),
    service: ShiftPlacementService = Depends(get_shift_service)
):
    result = service.create_shift(
        actor.company_id,
        payload.employee_id,
        payload.day,
        payload.start_time,
        payload.end_time,
        payload.break_minutes,
        department=payload.department,
        role=payload.role,
        location=payload.location,
        notes=payload.notes,
        published=payload.published,
    )
    return unwrap(result)


@router.post("/shifts/{shift_id}/move", response_model=ShiftResponse)
def move_shift(
    shift_id: int,
    payload: ShiftMove,
    actor: Actor = Depends(require_admin),
    service: ShiftPlacementService = Depends(get_shift_service)
):
    return unwrap(service.move_shift(actor.company_id, shift_id, payload.new_day))


@router.put("/shifts/{shift_id}/time", response_model=ShiftResponse)
def edit_shift_time(
    shift_id: int,
    payload: ShiftTimeUpdate,
    actor: Actor = Depends(require_admin),
    service: ShiftPlacementService = Depends(get_shift_service)
):
    result = service.edit_shift_time(
        actor.company_id, shift_id, payload.start_time, payload.end_time, payload.break_minutes
    )
    return unwrap(result)


@router.delete("/shifts/{shift_id}", response_model=ShiftDeleted)
def delete_shift(
    shift_id: int,
    actor: Actor = Depends(require_admin),
    service: ShiftPlacementService = Depends(get_shift_service)
):
    return unwrap(service.delete_shift(actor.company_id, shift_id))


@router.get("/shifts/{shift_id}", response_model=ShiftResponse)
def get_shift(
    shift_id: int,
    actor: Actor = Depends(get_actor),
    service: ShiftPlacementService = Depends(get_shift_service)
):
    shift = unwrap(service.get_shift(actor.company_id, shift_id))
    check_employee_access(actor, shift.employee_id)
    return shift


@router.get("/month", response_model=MonthRotaResponse)
def month_rota(
    reference: Optional[date] = None,
    employee_id: Optional[int] = None,
    department: Optional[str] = None,
    actor: Actor = Depends(get_actor),
    view: RotaViewService = Depends(get_rota_view)
):
    if not actor.is_admin:
        # Employees only ever see their own row of the rota
        employee_id = actor.actor_id
        check_employee_access(actor, employee_id)
    return unwrap(view.month_rota(actor.company_id, reference or date.today(), employee_id, department))


@router.get("/employees/{employee_id}/shifts", response_model=ShiftRangeResponse)
def employee_shifts(
    employee_id: int,
    start: date,
    end: date,
    actor: Actor = Depends(get_actor),
    view: RotaViewService = Depends(get_rota_view)
):
    check_employee_access(actor, employee_id)
    return unwrap(view.shifts_in_range(actor.company_id, employee_id, start, end))


@router.get("/employees/{employee_id}/activity", response_model=YearActivityResponse)
def employee_activity(
    employee_id: int,
    year: Optional[int] = None,
    actor: Actor = Depends(get_actor),
    view: RotaViewService = Depends(get_rota_view)
):
    check_employee_access(actor, employee_id)
    return unwrap(view.employee_year_activity(actor.company_id, employee_id, year or date.today().year))
