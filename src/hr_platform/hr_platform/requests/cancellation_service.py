"""Cancelling a PENDING or APPROVED vacation.

Only an APPROVED vacation holds days in the ledger, so only that case refunds
``number_of_days`` when the cancellation is approved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc
from ..common.validators import optional_text, require_positive_int, require_url_list
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import CancellationStatus, Decision
from ..core.exceptions import AuthorizationError, ConflictError, ErrorCode, NotFoundError
from ..database.unit_of_work import UnitOfWork
from ..ledger.service import LeaveBalanceLedger
from .model import VacationCancellationRequest
from .repository import CancellationRepository, VacationRepository
from .transitions import cancel_vacation, decide, ensure_cancellable, reserved_days

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewCancellation:
    vacation_id: object
    description: Optional[str] = None
    attachment_urls: Sequence[str] = field(default_factory=tuple)


class VacationCancellationWorkflow:
    def __init__(
        self,
        cancellations: CancellationRepository,
        vacations: VacationRepository,
        ledger: LeaveBalanceLedger,
        uow: UnitOfWork,
    ):
        self._cancellations = cancellations
        self._vacations = vacations
        self._ledger = ledger
        self._uow = uow

    def get(self, cancellation_id: int) -> VacationCancellationRequest:
        cancellation = self._cancellations.get_by_id(int(cancellation_id))
        if cancellation is None:
            raise NotFoundError(ErrorCode.REQUEST_NOT_FOUND, id=cancellation_id)
        return cancellation

    def create(
        self, employee_id: int, data: NewCancellation, *, now: Optional[datetime] = None
    ) -> VacationCancellationRequest:
        now = now or now_utc()

        vacation_id = require_positive_int(data.vacation_id, "vacation_id")
        description = optional_text(data.description, "description")
        urls = require_url_list(data.attachment_urls)

        with self._uow.atomic() as tx:
            vacation = self._vacations.get_by_id(vacation_id, tx=tx, for_update=True)
            if vacation is None:
                raise NotFoundError(ErrorCode.REQUEST_NOT_FOUND, id=vacation_id)
            if vacation.employee_id != int(employee_id):
                raise AuthorizationError(ErrorCode.NOT_OWNER)
            ensure_cancellable(vacation.status)
            if self._cancellations.has_pending(vacation.vacation_id, tx=tx):
                raise ConflictError(ErrorCode.CANCELLATION_REQUEST_PENDING)

            cancellation_id = self._cancellations.create(
                vacation_id=vacation.vacation_id,
                employee_id=vacation.employee_id,
                description=description,
                attachment_urls=urls,
                now=now,
                tx=tx,
            )

        logger.info("Cancellation %s requested for vacation %s", cancellation_id, vacation_id)
        return self.get(cancellation_id)

    def update_status(
        self, cancellation_id: int, decision: Decision, *, now: Optional[datetime] = None
    ) -> VacationCancellationRequest:
        now = now or now_utc()
        refunded = 0

        with self._uow.atomic() as tx:
            cancellation = self._cancellations.get_by_id(int(cancellation_id), tx=tx, for_update=True)
            if cancellation is None:
                raise NotFoundError(ErrorCode.REQUEST_NOT_FOUND, id=cancellation_id)

            new_status = decide(CancellationStatus, cancellation.status, decision)
            if new_status == CancellationStatus.APPROVED:
                vacation = self._vacations.get_by_id(cancellation.vacation_id, tx=tx, for_update=True)
                if vacation is None:
                    raise NotFoundError(ErrorCode.REQUEST_NOT_FOUND, id=cancellation.vacation_id)

                cancelled = cancel_vacation(vacation.status)
                if reserved_days(vacation.status):
                    refunded = vacation.number_of_days
                    self._ledger.refund(tx, vacation.employee_id, refunded)
                self._vacations.set_status(vacation.vacation_id, cancelled, now=now, tx=tx)
            self._cancellations.set_status(cancellation.cancellation_id, new_status, now=now, tx=tx)

        logger.info("Cancellation %s %s (refunded %s days)", cancellation_id, new_status.value, refunded)
        return self.get(cancellation_id)

    def list(
        self,
        *,
        status: Optional[CancellationStatus] = None,
        employee_id: Optional[int] = None,
        limit: Optional[int] = DEFAULT_LIST_LIMIT,
    ) -> Sequence[VacationCancellationRequest]:
        return self._cancellations.list(status=status, employee_id=employee_id, limit=limit)
