from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.enums import EmployeeStatus


@dataclass(frozen=True)
class Employee:
    """Directory entry for an employee, including the vacation ledger columns.

    The ledger columns are only read here; they are written through
    ``LeaveBalanceLedger``.
    """

    employee_id: int
    name: str
    status: EmployeeStatus
    total_vacation_days: Decimal
    used_vacation_days: Decimal

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE
