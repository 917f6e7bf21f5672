from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable, machine-readable error codes. Translated only at the HTTP boundary."""

    # Date ranges
    INVALID_DATE = "InvalidDate"
    RETURN_BEFORE_DEPARTURE = "ReturnBeforeDeparture"
    DAY_COUNT_MISMATCH = "DayCountMismatch"
    OVERLAP_CONFLICT = "OverlapConflict"
    INVALID_DATE_RANGE = "InvalidDateRange"

    # Requests / ledger
    EMPLOYEE_NOT_FOUND_OR_INACTIVE = "EmployeeNotFoundOrInactive"
    REQUEST_NOT_FOUND = "RequestNotFound"
    ALREADY_PROCESSED = "AlreadyProcessed"
    INVALID_STATUS_TRANSITION = "InvalidStatusTransition"
    INSUFFICIENT_BALANCE = "InsufficientBalance"
    NOT_OWNER = "NotOwner"
    CAN_ONLY_EXTEND_APPROVED = "CanOnlyExtendApproved"
    EXTEND_TO_DATE_MUST_BE_AFTER_RETURN = "ExtendToDateMustBeAfterReturn"
    EXTENSION_REQUEST_PENDING = "ExtensionRequestPending"
    CANNOT_CANCEL = "CannotCancel"
    CANCELLATION_REQUEST_PENDING = "CancellationRequestPending"

    # Attendance
    ALREADY_CLOCKED_IN = "AlreadyClockedIn"
    ALREADY_CLOCKED_OUT = "AlreadyClockedOut"
    NO_CLOCK_IN_FOUND = "NoClockInFound"
    ALREADY_ON_BREAK = "AlreadyOnBreak"
    NOT_ON_BREAK = "NotOnBreak"
    UNCLOSED_BREAK = "UnclosedBreak"
    CANNOT_CLOCK_OUT_ON_BREAK = "CannotClockOutOnBreak"

    # Boundary
    INVALID_INPUT = "InvalidInput"
    UNAUTHENTICATED = "Unauthenticated"
    FORBIDDEN = "Forbidden"
    HTTP_ERROR = "HttpError"
    INTERNAL_ERROR = "InternalError"


class DomainError(Exception):
    """Base exception for business rule violations.

    Carries an ``ErrorCode`` plus the arguments the localizer needs to render a
    message. ``http_status`` is only read by the transport layer.
    """

    http_status = 400

    def __init__(self, code: ErrorCode, **args: Any):
        super().__init__(code.value)
        self.code = code
        self.args_map = dict(args)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code.value}, {self.args_map!r})"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    http_status = 400


class AuthenticationError(DomainError):
    """Raised when the caller's identity is missing."""

    http_status = 401


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""

    http_status = 403


class NotFoundError(DomainError):
    http_status = 404


class ConflictError(DomainError):
    """Raised when the request conflicts with the current stored state."""

    http_status = 409
