from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol

from ..database.unit_of_work import Transaction
from .model import LeaveBalance


class LedgerRepository(Protocol):
    def get_balance(
        self,
        employee_id: int,
        *,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def add_used_days(self, employee_id: int, delta: Decimal, *, tx: Transaction) -> None:
        """Apply ``used_vacation_days += delta``. Only valid inside an atomic unit."""

        raise NotImplementedError
