# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import company, employee, shift, leave_request, leave_entitlement

# Explicit class exports for cleaner imports
from .company import Company
from .employee import Employee
from .shift import Shift
from .leave_request import LeaveRequest, LeaveStatus, LeaveType
from .leave_entitlement import LeaveEntitlement

__all__ = [
    "Company",
    "Employee",
    "Shift",
    "LeaveRequest",
    "LeaveStatus",
    "LeaveType",
    "LeaveEntitlement",
]
