from __future__ import annotations

from typing import Optional

from ..core.enums import EmployeeStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import fetchone, lock_clause, to_decimal, tx_cursor
from ..database.unit_of_work import Transaction
from .model import Employee
from .repository import EmployeeDirectory


class MySQLEmployeeDirectory(EmployeeDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(
        self,
        employee_id: int,
        *,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[Employee]:
        with tx_cursor(self._conn_factory, tx) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, name, status, total_vacation_days, used_vacation_days
                FROM employees
                WHERE employee_id=%s
                """
                + lock_clause(for_update),
                (int(employee_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Employee(
                employee_id=int(row["employee_id"]),
                name=row["name"],
                status=EmployeeStatus(row["status"]),
                total_vacation_days=to_decimal(row["total_vacation_days"]),
                used_vacation_days=to_decimal(row["used_vacation_days"]),
            )

    def is_active(self, employee_id: int) -> bool:
        employee = self.get_by_id(employee_id)
        return bool(employee and employee.is_active)
