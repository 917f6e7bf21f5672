from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from ..common.date_range import assert_day_count_matches, assert_no_overlap, inclusive_days, validated_range
from ..common.datetime_utils import now_utc
from ..common.validators import optional_text, require_positive_int, require_url_list
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import Decision, SickLeaveStatus
from ..core.exceptions import ErrorCode, NotFoundError
from ..database.unit_of_work import UnitOfWork
from ..employees.repository import EmployeeDirectory
from ..employees.service import require_active_employee
from .model import SickLeaveRequest
from .repository import SickLeaveRepository
from .transitions import decide

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewSickLeave:
    departure_day: object
    return_day: object
    number_of_days: object
    reason: Optional[str] = None
    attachment_urls: Sequence[str] = field(default_factory=tuple)


class SickLeaveRequestWorkflow:
    """Same lifecycle as vacations, without any ledger effect.

    Overlaps are only checked against the employee's other sick leaves.
    """

    def __init__(self, sick_leaves: SickLeaveRepository, employees: EmployeeDirectory, uow: UnitOfWork):
        self._sick_leaves = sick_leaves
        self._employees = employees
        self._uow = uow

    def get(self, sick_leave_id: int) -> SickLeaveRequest:
        sick_leave = self._sick_leaves.get_by_id(int(sick_leave_id))
        if sick_leave is None:
            raise NotFoundError(ErrorCode.REQUEST_NOT_FOUND, id=sick_leave_id)
        return sick_leave

    def create(self, employee_id: int, data: NewSickLeave, *, now: Optional[datetime] = None) -> SickLeaveRequest:
        now = now or now_utc()

        departure_day, return_day = validated_range(data.departure_day, data.return_day)
        number_of_days = require_positive_int(data.number_of_days, "number_of_days")
        reason = optional_text(data.reason, "reason")
        urls = require_url_list(data.attachment_urls)

        with self._uow.atomic() as tx:
            require_active_employee(self._employees, employee_id, tx=tx, for_update=True)
            assert_no_overlap(self._sick_leaves, employee_id, departure_day, return_day, tx=tx)
            assert_day_count_matches(number_of_days, inclusive_days(departure_day, return_day))

            sick_leave_id = self._sick_leaves.create(
                employee_id=int(employee_id),
                departure_day=departure_day,
                return_day=return_day,
                number_of_days=number_of_days,
                reason=reason,
                attachment_urls=urls,
                now=now,
                tx=tx,
            )

        logger.info("Sick leave %s created for employee %s", sick_leave_id, employee_id)
        return self.get(sick_leave_id)

    def update_status(self, sick_leave_id: int, decision: Decision, *, now: Optional[datetime] = None) -> SickLeaveRequest:
        now = now or now_utc()

        with self._uow.atomic() as tx:
            sick_leave = self._sick_leaves.get_by_id(int(sick_leave_id), tx=tx, for_update=True)
            if sick_leave is None:
                raise NotFoundError(ErrorCode.REQUEST_NOT_FOUND, id=sick_leave_id)
            new_status = decide(SickLeaveStatus, sick_leave.status, decision)
            self._sick_leaves.set_status(sick_leave.sick_leave_id, new_status, now=now, tx=tx)

        logger.info("Sick leave %s %s", sick_leave_id, new_status.value)
        return self.get(sick_leave_id)

    def list(
        self,
        *,
        status: Optional[SickLeaveStatus] = None,
        employee_id: Optional[int] = None,
        limit: Optional[int] = DEFAULT_LIST_LIMIT,
    ) -> Sequence[SickLeaveRequest]:
        return self._sick_leaves.list(status=status, employee_id=employee_id, limit=limit)
