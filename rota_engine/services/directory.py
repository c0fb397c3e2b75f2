from typing import Optional

from sqlalchemy.orm import Session

from rota_engine.models.employee import Employee


def get_employee(db: Session, company_id: int, employee_id: int) -> Optional[Employee]:
    """Employee lookup scoped to one company; None when the id belongs elsewhere."""
    return db.query(Employee).filter(
        Employee.id == employee_id,
        Employee.company_id == company_id
    ).first()
