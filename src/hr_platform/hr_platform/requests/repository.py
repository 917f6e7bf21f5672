from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import (
    CancellationStatus,
    ExtensionStatus,
    SickLeaveStatus,
    VacationReason,
    VacationStatus,
    VacationType,
)
from ..database.unit_of_work import Transaction
from .model import SickLeaveRequest, VacationCancellationRequest, VacationExtensionRequest, VacationRequest


class VacationRepository(Protocol):
    def exists_overlap(
        self,
        *,
        employee_id: int,
        departure_day: date,
        return_day: date,
        exclude_id: Optional[int] = None,
        tx: Optional[Transaction] = None,
    ) -> bool:
        """PENDING/APPROVED vacations of the employee intersecting the closed range."""

        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        departure_day: date,
        return_day: date,
        number_of_days: int,
        reason: VacationReason,
        vacation_type: VacationType,
        description: Optional[str],
        attachment_urls: Sequence[str],
        now: datetime,
        tx: Optional[Transaction] = None,
    ) -> int:
        raise NotImplementedError

    def get_by_id(
        self,
        vacation_id: int,
        *,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[VacationRequest]:
        raise NotImplementedError

    def set_status(self, vacation_id: int, status: VacationStatus, *, now: datetime, tx: Transaction) -> None:
        raise NotImplementedError

    def extend(self, vacation_id: int, *, return_day: date, number_of_days: int, now: datetime, tx: Transaction) -> None:
        raise NotImplementedError

    def list(
        self,
        *,
        status: Optional[VacationStatus] = None,
        employee_id: Optional[int] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[VacationRequest]:
        """Newest first."""

        raise NotImplementedError


class SickLeaveRepository(Protocol):
    def exists_overlap(
        self,
        *,
        employee_id: int,
        departure_day: date,
        return_day: date,
        exclude_id: Optional[int] = None,
        tx: Optional[Transaction] = None,
    ) -> bool:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        departure_day: date,
        return_day: date,
        number_of_days: int,
        reason: Optional[str],
        attachment_urls: Sequence[str],
        now: datetime,
        tx: Optional[Transaction] = None,
    ) -> int:
        raise NotImplementedError

    def get_by_id(
        self,
        sick_leave_id: int,
        *,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[SickLeaveRequest]:
        raise NotImplementedError

    def set_status(self, sick_leave_id: int, status: SickLeaveStatus, *, now: datetime, tx: Transaction) -> None:
        raise NotImplementedError

    def list(
        self,
        *,
        status: Optional[SickLeaveStatus] = None,
        employee_id: Optional[int] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[SickLeaveRequest]:
        raise NotImplementedError


class ExtensionRepository(Protocol):
    def has_pending(self, vacation_id: int, *, tx: Optional[Transaction] = None) -> bool:
        raise NotImplementedError

    def create(
        self,
        *,
        vacation_id: int,
        employee_id: int,
        extend_to_date: date,
        additional_days: int,
        description: Optional[str],
        attachment_urls: Sequence[str],
        now: datetime,
        tx: Optional[Transaction] = None,
    ) -> int:
        raise NotImplementedError

    def get_by_id(
        self,
        extension_id: int,
        *,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[VacationExtensionRequest]:
        raise NotImplementedError

    def set_status(self, extension_id: int, status: ExtensionStatus, *, now: datetime, tx: Transaction) -> None:
        raise NotImplementedError

    def list(
        self,
        *,
        status: Optional[ExtensionStatus] = None,
        employee_id: Optional[int] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[VacationExtensionRequest]:
        raise NotImplementedError


class CancellationRepository(Protocol):
    def has_pending(self, vacation_id: int, *, tx: Optional[Transaction] = None) -> bool:
        raise NotImplementedError

    def create(
        self,
        *,
        vacation_id: int,
        employee_id: int,
        description: Optional[str],
        attachment_urls: Sequence[str],
        now: datetime,
        tx: Optional[Transaction] = None,
    ) -> int:
        raise NotImplementedError

    def get_by_id(
        self,
        cancellation_id: int,
        *,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[VacationCancellationRequest]:
        raise NotImplementedError

    def set_status(self, cancellation_id: int, status: CancellationStatus, *, now: datetime, tx: Transaction) -> None:
        raise NotImplementedError

    def list(
        self,
        *,
        status: Optional[CancellationStatus] = None,
        employee_id: Optional[int] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[VacationCancellationRequest]:
        raise NotImplementedError
