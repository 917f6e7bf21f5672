"""Extending an APPROVED vacation past its current return day.

Approval moves the vacation's return day, grows its day count and reserves the
additional days in the ledger, all in one atomic unit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from ..common.date_range import day_after, inclusive_days, parse_date
from ..common.datetime_utils import now_utc
from ..common.validators import optional_text, require_positive_int, require_url_list
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import Decision, ExtensionStatus
from ..core.exceptions import AuthorizationError, ConflictError, ErrorCode, NotFoundError, ValidationError
from ..database.unit_of_work import UnitOfWork
from ..ledger.service import LeaveBalanceLedger
from .model import VacationExtensionRequest
from .repository import ExtensionRepository, VacationRepository
from .transitions import decide, ensure_extendable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewExtension:
    vacation_id: object
    extend_to_date: object
    description: Optional[str] = None
    attachment_urls: Sequence[str] = field(default_factory=tuple)


class VacationExtensionWorkflow:
    def __init__(
        self,
        extensions: ExtensionRepository,
        vacations: VacationRepository,
        ledger: LeaveBalanceLedger,
        uow: UnitOfWork,
    ):
        self._extensions = extensions
        self._vacations = vacations
        self._ledger = ledger
        self._uow = uow

    def get(self, extension_id: int) -> VacationExtensionRequest:
        extension = self._extensions.get_by_id(int(extension_id))
        if extension is None:
            raise NotFoundError(ErrorCode.REQUEST_NOT_FOUND, id=extension_id)
        return extension

    def create(self, employee_id: int, data: NewExtension, *, now: Optional[datetime] = None) -> VacationExtensionRequest:
        now = now or now_utc()

        vacation_id = require_positive_int(data.vacation_id, "vacation_id")
        extend_to_date = parse_date(data.extend_to_date, field="extend_to_date")
        description = optional_text(data.description, "description")
        urls = require_url_list(data.attachment_urls)

        with self._uow.atomic() as tx:
            vacation = self._vacations.get_by_id(vacation_id, tx=tx, for_update=True)
            if vacation is None:
                raise NotFoundError(ErrorCode.REQUEST_NOT_FOUND, id=vacation_id)
            if vacation.employee_id != int(employee_id):
                raise AuthorizationError(ErrorCode.NOT_OWNER)
            ensure_extendable(vacation.status)
            if extend_to_date <= vacation.return_day:
                raise ValidationError(ErrorCode.EXTEND_TO_DATE_MUST_BE_AFTER_RETURN, return_day=vacation.return_day.isoformat())

            additional_days = inclusive_days(day_after(vacation.return_day), extend_to_date)

            if self._extensions.has_pending(vacation.vacation_id, tx=tx):
                raise ConflictError(ErrorCode.EXTENSION_REQUEST_PENDING)

            extension_id = self._extensions.create(
                vacation_id=vacation.vacation_id,
                employee_id=vacation.employee_id,
                extend_to_date=extend_to_date,
                additional_days=additional_days,
                description=description,
                attachment_urls=urls,
                now=now,
                tx=tx,
            )

        logger.info("Extension %s requested for vacation %s (+%s days)", extension_id, vacation_id, additional_days)
        return self.get(extension_id)

    def update_status(self, extension_id: int, decision: Decision, *, now: Optional[datetime] = None) -> VacationExtensionRequest:
        now = now or now_utc()

        with self._uow.atomic() as tx:
            extension = self._extensions.get_by_id(int(extension_id), tx=tx, for_update=True)
            if extension is None:
                raise NotFoundError(ErrorCode.REQUEST_NOT_FOUND, id=extension_id)

            new_status = decide(ExtensionStatus, extension.status, decision)
            if new_status == ExtensionStatus.APPROVED:
                vacation = self._vacations.get_by_id(extension.vacation_id, tx=tx, for_update=True)
                if vacation is None:
                    raise NotFoundError(ErrorCode.REQUEST_NOT_FOUND, id=extension.vacation_id)
                # The vacation may have been cancelled since the extension was filed.
                ensure_extendable(vacation.status)

                self._ledger.reserve(tx, vacation.employee_id, extension.additional_days)
                self._vacations.extend(
                    vacation.vacation_id,
                    return_day=extension.extend_to_date,
                    number_of_days=vacation.number_of_days + extension.additional_days,
                    now=now,
                    tx=tx,
                )
            self._extensions.set_status(extension.extension_id, new_status, now=now, tx=tx)

        logger.info("Extension %s %s", extension_id, new_status.value)
        return self.get(extension_id)

    def list(
        self,
        *,
        status: Optional[ExtensionStatus] = None,
        employee_id: Optional[int] = None,
        limit: Optional[int] = DEFAULT_LIST_LIMIT,
    ) -> Sequence[VacationExtensionRequest]:
        return self._extensions.list(status=status, employee_id=employee_id, limit=limit)
