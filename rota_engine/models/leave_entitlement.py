from sqlalchemy import Column, Integer, String, Date, Float, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from rota_engine.database import Base


class LeaveEntitlement(Base):
    """Days an employee is entitled to for one leave type over one period."""
    __tablename__ = "leave_entitlements"
    __table_args__ = (
        UniqueConstraint("employee_id", "leave_type", "period_start", name="uq_entitlement_period"),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    leave_type = Column(String, index=True, nullable=False)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    entitled_days = Column(Float, default=0.0, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
