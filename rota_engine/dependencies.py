"""
Request-scoped dependencies for the rota API.

Authentication lives outside this service: the gateway in front of it
resolves the session and forwards the company and actor as headers. Every
engine call receives the company id explicitly from here.
"""
import logging
from typing import Optional

from fastapi import Depends, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from rota_engine.core.config import settings
from rota_engine.core.exceptions import (
    STATUS_BY_REASON,
    AccessDeniedError,
    AppException,
    MissingContextError,
)
from rota_engine.core.schemas import EngineResult
from rota_engine.database import get_db
from rota_engine.services.leave_ledger import LeaveLedgerService
from rota_engine.services.notification import ChangeFeed
from rota_engine.services.rota_view import RotaViewService
from rota_engine.services.shift_placement import ShiftPlacementService

logger = logging.getLogger(__name__)

ADMIN_ROLE = "business_admin"
EMPLOYEE_ROLE = "employee"


class Actor(BaseModel):
    company_id: int
    actor_id: Optional[int] = None
    role: str = EMPLOYEE_ROLE

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def _int_header(request: Request, name: str) -> Optional[int]:
    raw = request.headers.get(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise MissingContextError(f"Header {name} must be an integer")


def get_actor(request: Request) -> Actor:
    company_id = _int_header(request, settings.company_header)
    if company_id is None:
        logger.warning("Request rejected: no company context")
        raise MissingContextError()
    return Actor(
        company_id=company_id,
        actor_id=_int_header(request, settings.actor_header),
        role=request.headers.get(settings.role_header, EMPLOYEE_ROLE),
    )


def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    if not actor.is_admin:
        raise AccessDeniedError("Only business admins can change the rota")
    return actor


def check_employee_access(actor: Actor, employee_id: int):
    """Employees only see and request for themselves."""
    if not actor.is_admin and (actor.actor_id is None or actor.actor_id != employee_id):
        raise AccessDeniedError("Employees can only access their own records")


def get_change_feed(request: Request) -> ChangeFeed:
    feed = getattr(request.app.state, "change_feed", None)
    if feed is None:
        feed = ChangeFeed()
        request.app.state.change_feed = feed
    return feed


def get_shift_service(db: Session = Depends(get_db), feed: ChangeFeed = Depends(get_change_feed)) -> ShiftPlacementService:
    return ShiftPlacementService(db, feed)


def get_leave_service(db: Session = Depends(get_db), feed: ChangeFeed = Depends(get_change_feed)) -> LeaveLedgerService:
    return LeaveLedgerService(db, feed)


def get_rota_view(db: Session = Depends(get_db)) -> RotaViewService:
    return RotaViewService(db)


def unwrap(result: EngineResult):
    """Return the data of a successful result or raise it as an HTTP error."""
    if result.success:
        return result.data
    raise AppException(
        message=result.error.message,
        status_code=STATUS_BY_REASON.get(result.reason, 400),
        error_code=result.error.code,
        details=result.error.details,
    )
