from __future__ import annotations

from typing import Optional

from ..core.exceptions import ErrorCode, NotFoundError
from ..database.unit_of_work import Transaction
from .model import Employee
from .repository import EmployeeDirectory


def require_active_employee(
    directory: EmployeeDirectory,
    employee_id: int,
    *,
    tx: Optional[Transaction] = None,
    for_update: bool = False,
) -> Employee:
    employee = directory.get_by_id(int(employee_id), tx=tx, for_update=for_update)
    if employee is None or not employee.is_active:
        raise NotFoundError(ErrorCode.EMPLOYEE_NOT_FOUND_OR_INACTIVE, employee_id=employee_id)
    return employee
