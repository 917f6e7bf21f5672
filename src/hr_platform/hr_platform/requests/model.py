from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Union

from ..core.enums import (
    CancellationStatus,
    ExtensionStatus,
    RequestKind,
    SickLeaveStatus,
    VacationReason,
    VacationStatus,
    VacationType,
)


@dataclass(frozen=True)
class VacationRequest:
    vacation_id: int
    employee_id: int
    departure_day: date
    return_day: date
    number_of_days: int
    reason: VacationReason
    vacation_type: VacationType
    status: VacationStatus
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None
    attachment_urls: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SickLeaveRequest:
    sick_leave_id: int
    employee_id: int
    departure_day: date
    return_day: date
    number_of_days: int
    status: SickLeaveStatus
    created_at: datetime
    updated_at: datetime
    reason: Optional[str] = None
    attachment_urls: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class VacationExtensionRequest:
    extension_id: int
    vacation_id: int
    employee_id: int
    extend_to_date: date
    additional_days: int
    status: ExtensionStatus
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None
    attachment_urls: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class VacationCancellationRequest:
    cancellation_id: int
    vacation_id: int
    employee_id: int
    status: CancellationStatus
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None
    attachment_urls: tuple[str, ...] = field(default_factory=tuple)


AnyRequest = Union[VacationRequest, SickLeaveRequest, VacationExtensionRequest, VacationCancellationRequest]


@dataclass(frozen=True)
class UnifiedRequest:
    """One request of any kind, as shown in cross-kind listings."""

    kind: RequestKind
    request: AnyRequest

    @property
    def request_id(self) -> int:
        r = self.request
        if isinstance(r, VacationRequest):
            return r.vacation_id
        if isinstance(r, SickLeaveRequest):
            return r.sick_leave_id
        if isinstance(r, VacationExtensionRequest):
            return r.extension_id
        return r.cancellation_id

    @property
    def employee_id(self) -> int:
        return self.request.employee_id

    @property
    def created_at(self) -> datetime:
        return self.request.created_at

    @property
    def status(self) -> str:
        return self.request.status.value
