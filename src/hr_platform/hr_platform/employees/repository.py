from __future__ import annotations

from typing import Optional, Protocol

from ..database.unit_of_work import Transaction
from .model import Employee


class EmployeeDirectory(Protocol):
    """Existence and active-status lookups owned by the employee directory."""

    def get_by_id(
        self,
        employee_id: int,
        *,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[Employee]:
        raise NotImplementedError

    def is_active(self, employee_id: int) -> bool:
        raise NotImplementedError
