"""Vacation-day ledger: ``available = total - used``.

``reserve`` and ``refund`` must run inside the same atomic unit as the status
transition that triggers them. Both lock the employee row first so that two
approvals for the same employee serialize and the second one sees the
committed balance of the first.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from ..core.exceptions import ConflictError, ErrorCode, NotFoundError
from ..database.unit_of_work import Transaction
from .model import LeaveBalance
from .repository import LedgerRepository

logger = logging.getLogger(__name__)


class LeaveBalanceLedger:
    def __init__(self, repo: LedgerRepository):
        self._repo = repo

    @staticmethod
    def available(balance: LeaveBalance) -> Decimal:
        return balance.available

    def snapshot(self, employee_id: int) -> Optional[LeaveBalance]:
        """Unlocked read for display purposes."""

        return self._repo.get_balance(int(employee_id))

    def lock(self, tx: Transaction, employee_id: int) -> LeaveBalance:
        balance = self._repo.get_balance(int(employee_id), tx=tx, for_update=True)
        if balance is None:
            raise NotFoundError(ErrorCode.EMPLOYEE_NOT_FOUND_OR_INACTIVE, employee_id=employee_id)
        return balance

    @staticmethod
    def ensure_available(balance: LeaveBalance, days: int | Decimal) -> None:
        requested = Decimal(days)
        if balance.available < requested:
            logger.warning(
                "Insufficient balance for employee %s: available=%s requested=%s",
                balance.employee_id,
                balance.available,
                requested,
            )
            raise ConflictError(
                ErrorCode.INSUFFICIENT_BALANCE,
                available=balance.available,
                requested=requested,
            )

    def reserve(self, tx: Transaction, employee_id: int, days: int | Decimal) -> LeaveBalance:
        balance = self.lock(tx, employee_id)
        self.ensure_available(balance, days)
        self._repo.add_used_days(balance.employee_id, Decimal(days), tx=tx)
        return LeaveBalance(
            employee_id=balance.employee_id,
            total_days=balance.total_days,
            used_days=balance.used_days + Decimal(days),
        )

    def refund(self, tx: Transaction, employee_id: int, days: int | Decimal) -> LeaveBalance:
        balance = self.lock(tx, employee_id)
        self._repo.add_used_days(balance.employee_id, -Decimal(days), tx=tx)
        return LeaveBalance(
            employee_id=balance.employee_id,
            total_days=balance.total_days,
            used_days=balance.used_days - Decimal(days),
        )
