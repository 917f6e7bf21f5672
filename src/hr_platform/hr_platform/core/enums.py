from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller role supplied by the identity layer."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class EmployeeStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    TERMINATED = "TERMINATED"


class VacationStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class SickLeaveStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ExtensionStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class CancellationStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Decision(str, Enum):
    """The only two outcomes an admin may choose for a PENDING request."""

    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class VacationReason(str, Enum):
    ANNUAL_LEAVE = "ANNUAL_LEAVE"
    EMERGENCY_LEAVE = "EMERGENCY_LEAVE"
    MATERNITY_LEAVE = "MATERNITY_LEAVE"
    MARRIAGE_LEAVE = "MARRIAGE_LEAVE"
    OTHER = "OTHER"


class VacationType(str, Enum):
    PAID = "PAID"
    UNPAID = "UNPAID"


class RequestKind(str, Enum):
    VACATION = "VACATION"
    SICK_LEAVE = "SICK_LEAVE"
    VACATION_EXTENSION = "VACATION_EXTENSION"
    VACATION_CANCELLATION = "VACATION_CANCELLATION"


class AttendanceStatus(str, Enum):
    """Per-day clock state. CLOCKED_OUT is terminal for the day."""

    CLOCKED_IN = "CLOCKED_IN"
    ON_BREAK = "ON_BREAK"
    CLOCKED_OUT = "CLOCKED_OUT"
