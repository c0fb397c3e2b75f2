"""
Employee directory row.
Written by the employee-management subsystem; the scheduling engine only reads it.
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from rota_engine.database import Base


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    full_name = Column(String, nullable=False)
    department = Column(String, nullable=True)  # Free text, non-authoritative
    employment_start_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    company = relationship("Company", back_populates="employees")

    def __repr__(self):
        return f"<Employee {self.id}: {self.full_name}>"
