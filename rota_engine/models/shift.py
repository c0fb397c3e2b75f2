from datetime import timedelta
from sqlalchemy import Column, Integer, String, Date, DateTime, Boolean, ForeignKey, Text, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from rota_engine.database import Base


class Shift(Base):
    __tablename__ = "shifts"
    __table_args__ = (
        # One shift per employee per calendar day
        UniqueConstraint("employee_id", "shift_date", name="uq_shift_employee_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)

    # Civil date of start_time; kept in sync by the placement engine
    shift_date = Column(Date, nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    break_minutes = Column(Integer, default=0, nullable=False)

    department = Column(String, nullable=True)
    role = Column(String, nullable=True)
    location = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    published = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    employee = relationship("Employee")

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    @property
    def paid_minutes(self) -> int:
        gross = int(self.duration.total_seconds() // 60)
        return max(0, gross - (self.break_minutes or 0))

    @property
    def employee_name(self) -> str:
        return self.employee.full_name if self.employee else ""

    def __repr__(self):
        return f"<Shift {self.id}: employee={self.employee_id} {self.start_time:%Y-%m-%d %H:%M}>"
