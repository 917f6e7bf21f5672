from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import fetchone, lock_clause, to_decimal, tx_cursor
from ..database.unit_of_work import Transaction
from .model import LeaveBalance
from .repository import LedgerRepository


class MySQLLedgerRepository(LedgerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_balance(
        self,
        employee_id: int,
        *,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[LeaveBalance]:
        with tx_cursor(self._conn_factory, tx) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, total_vacation_days, used_vacation_days
                FROM employees
                WHERE employee_id=%s
                """
                + lock_clause(for_update),
                (int(employee_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return LeaveBalance(
                employee_id=int(row["employee_id"]),
                total_days=to_decimal(row["total_vacation_days"]),
                used_days=to_decimal(row["used_vacation_days"]),
            )

    def add_used_days(self, employee_id: int, delta: Decimal, *, tx: Transaction) -> None:
        tx.cursor.execute(
            """
            UPDATE employees
            SET used_vacation_days = used_vacation_days + %s
            WHERE employee_id=%s
            """,
            (Decimal(delta), int(employee_id)),
        )
