import enum
from typing import Any, Dict, Optional


class ConflictReason(str, enum.Enum):
    """Business-rule rejections surfaced to callers as typed results."""
    HOLIDAY = "Holiday"
    DUPLICATE_ASSIGNMENT = "DuplicateAssignment"
    ON_LEAVE = "OnLeave"
    OVERLAPPING_LEAVE = "OverlappingLeave"
    INVALID_TIME_RANGE = "InvalidTimeRange"
    NOT_FOUND = "NotFound"
    INVALID_TRANSITION = "InvalidTransition"


class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class BusinessRuleError(AppException):
    """
    Base for every rejection in the scheduling taxonomy.
    Services convert these into EngineResult.fail(); they never escape a
    public engine operation.
    """
    reason: ConflictReason = ConflictReason.INVALID_TIME_RANGE
    http_status: int = 409

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=self.http_status,
            error_code=self.reason.value,
            details=details
        )


class ConflictError(BusinessRuleError):
    """A placement or leave request collides with existing state."""

    def __init__(self, reason: ConflictReason, message: str, details: Optional[Dict[str, Any]] = None):
        self.reason = reason
        super().__init__(message, details)


class HolidayConflict(ConflictError):
    def __init__(self, day, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            ConflictReason.HOLIDAY,
            "Cannot assign shift: this is a public/bank holiday.",
            {"day": day.isoformat(), **(details or {})}
        )


class DuplicateAssignmentConflict(ConflictError):
    def __init__(self, employee_id: int, day, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            ConflictReason.DUPLICATE_ASSIGNMENT,
            "This employee already has a shift on this day.",
            {"employee_id": employee_id, "day": day.isoformat(), **(details or {})}
        )


class OnLeaveConflict(ConflictError):
    def __init__(self, employee_id: int, day, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            ConflictReason.ON_LEAVE,
            "Cannot assign shift: employee is on leave on this day.",
            {"employee_id": employee_id, "day": day.isoformat(), **(details or {})}
        )


class OverlappingLeaveConflict(ConflictError):
    def __init__(self, employee_id: int, start, end):
        super().__init__(
            ConflictReason.OVERLAPPING_LEAVE,
            "Leave dates overlap with an existing pending/approved request.",
            {"employee_id": employee_id, "start_date": start.isoformat(), "end_date": end.isoformat()}
        )


class InvalidTimeRangeError(BusinessRuleError):
    reason = ConflictReason.INVALID_TIME_RANGE
    http_status = 422


class NotFoundError(BusinessRuleError):
    reason = ConflictReason.NOT_FOUND
    http_status = 404

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} not found", {"entity": entity, "id": entity_id})


class InvalidTransitionError(BusinessRuleError):
    reason = ConflictReason.INVALID_TRANSITION
    http_status = 409

    def __init__(self, current: str, target: str):
        super().__init__(
            f"Leave request cannot move from {current} to {target}",
            {"current_status": current, "target_status": target}
        )


class DatastoreUnavailableError(AppException):
    """Infrastructure failure; callers decide whether to retry."""
    def __init__(self, message: str = "The datastore is currently unavailable."):
        super().__init__(
            message=message,
            status_code=503,
            error_code="Unavailable"
        )


class AccessDeniedError(AppException):
    """Custom permission error. Named AccessDeniedError to avoid shadowing Python's built-in PermissionError."""
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(
            message=message,
            status_code=403,
            error_code="PERMISSION_DENIED"
        )


class MissingContextError(AppException):
    def __init__(self, message: str = "Missing company or actor context"):
        super().__init__(
            message=message,
            status_code=401,
            error_code="CONTEXT_MISSING"
        )


# HTTP status per business rejection, for callers that only hold the code
STATUS_BY_REASON = {
    ConflictReason.HOLIDAY: 409,
    ConflictReason.DUPLICATE_ASSIGNMENT: 409,
    ConflictReason.ON_LEAVE: 409,
    ConflictReason.OVERLAPPING_LEAVE: 409,
    ConflictReason.INVALID_TIME_RANGE: 422,
    ConflictReason.NOT_FOUND: 404,
    ConflictReason.INVALID_TRANSITION: 409,
}
