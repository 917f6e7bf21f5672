from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class LeaveBalance:
    """An employee's vacation entitlement and consumption."""

    employee_id: int
    total_days: Decimal
    used_days: Decimal

    @property
    def available(self) -> Decimal:
        return self.total_days - self.used_days
