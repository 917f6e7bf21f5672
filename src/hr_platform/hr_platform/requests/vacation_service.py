"""Primary vacation requests.

PENDING -> APPROVED | REJECTED through ``update_status``. APPROVED vacations
are later extended in place or cancelled by the two secondary workflows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from ..common.date_range import assert_day_count_matches, assert_no_overlap, inclusive_days, validated_range
from ..common.datetime_utils import now_utc
from ..common.validators import optional_text, require_enum, require_positive_int, require_url_list
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import Decision, VacationReason, VacationStatus, VacationType
from ..core.exceptions import ErrorCode, NotFoundError
from ..database.unit_of_work import UnitOfWork
from ..employees.repository import EmployeeDirectory
from ..employees.service import require_active_employee
from ..ledger.service import LeaveBalanceLedger
from .model import VacationRequest
from .repository import VacationRepository
from .transitions import decide

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewVacation:
    departure_day: object
    return_day: object
    number_of_days: object
    reason: object
    vacation_type: object
    description: Optional[str] = None
    attachment_urls: Sequence[str] = field(default_factory=tuple)


class VacationRequestWorkflow:
    def __init__(
        self,
        vacations: VacationRepository,
        employees: EmployeeDirectory,
        ledger: LeaveBalanceLedger,
        uow: UnitOfWork,
    ):
        self._vacations = vacations
        self._employees = employees
        self._ledger = ledger
        self._uow = uow

    def get(self, vacation_id: int) -> VacationRequest:
        vacation = self._vacations.get_by_id(int(vacation_id))
        if vacation is None:
            raise NotFoundError(ErrorCode.REQUEST_NOT_FOUND, id=vacation_id)
        return vacation

    def create(self, employee_id: int, data: NewVacation, *, now: Optional[datetime] = None) -> VacationRequest:
        now = now or now_utc()

        departure_day, return_day = validated_range(data.departure_day, data.return_day)
        number_of_days = require_positive_int(data.number_of_days, "number_of_days")
        reason = require_enum(VacationReason, data.reason, "reason")
        vacation_type = require_enum(VacationType, data.vacation_type, "type")
        description = optional_text(data.description, "description")
        urls = require_url_list(data.attachment_urls)

        with self._uow.atomic() as tx:
            # Locking the employee row serializes concurrent submissions for the same employee.
            require_active_employee(self._employees, employee_id, tx=tx, for_update=True)
            assert_no_overlap(self._vacations, employee_id, departure_day, return_day, tx=tx)
            assert_day_count_matches(number_of_days, inclusive_days(departure_day, return_day))

            vacation_id = self._vacations.create(
                employee_id=int(employee_id),
                departure_day=departure_day,
                return_day=return_day,
                number_of_days=number_of_days,
                reason=reason,
                vacation_type=vacation_type,
                description=description,
                attachment_urls=urls,
                now=now,
                tx=tx,
            )

        logger.info("Vacation %s created for employee %s (%s days)", vacation_id, employee_id, number_of_days)
        return self.get(vacation_id)

    def update_status(self, vacation_id: int, decision: Decision, *, now: Optional[datetime] = None) -> VacationRequest:
        now = now or now_utc()

        with self._uow.atomic() as tx:
            vacation = self._vacations.get_by_id(int(vacation_id), tx=tx, for_update=True)
            if vacation is None:
                raise NotFoundError(ErrorCode.REQUEST_NOT_FOUND, id=vacation_id)

            new_status = decide(VacationStatus, vacation.status, decision)
            if new_status == VacationStatus.APPROVED:
                self._ledger.reserve(tx, vacation.employee_id, vacation.number_of_days)
            self._vacations.set_status(vacation.vacation_id, new_status, now=now, tx=tx)

        logger.info("Vacation %s %s", vacation_id, new_status.value)
        return self.get(vacation_id)

    def list(
        self,
        *,
        status: Optional[VacationStatus] = None,
        employee_id: Optional[int] = None,
        limit: Optional[int] = DEFAULT_LIST_LIMIT,
    ) -> Sequence[VacationRequest]:
        return self._vacations.list(status=status, employee_id=employee_id, limit=limit)

