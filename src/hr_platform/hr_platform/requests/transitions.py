"""Status transitions for every request kind.

Each transition is an explicit function over the closed status enums; an
illegal source state raises instead of silently writing.
"""

from __future__ import annotations

from typing import Type, TypeVar

from ..core.enums import Decision, VacationStatus
from ..core.exceptions import ConflictError, ErrorCode, ValidationError

S = TypeVar("S", bound=str)


def parse_decision(value: object) -> Decision:
    """Only APPROVED and REJECTED may be requested by an admin."""

    try:
        return Decision(str(value).strip().upper())
    except ValueError:
        raise ValidationError(ErrorCode.INVALID_STATUS_TRANSITION, status=value)


def decide(status_cls: Type[S], current: S, decision: Decision) -> S:
    """PENDING -> APPROVED | REJECTED. Anything else is already processed."""

    if current != status_cls("PENDING"):
        raise ConflictError(ErrorCode.ALREADY_PROCESSED, status=current.value)
    return status_cls(decision.value)


def cancel_vacation(current: VacationStatus) -> VacationStatus:
    """PENDING | APPROVED -> CANCELLED."""

    if current not in (VacationStatus.PENDING, VacationStatus.APPROVED):
        raise ConflictError(ErrorCode.CANNOT_CANCEL, status=current.value)
    return VacationStatus.CANCELLED


def ensure_cancellable(current: VacationStatus) -> None:
    cancel_vacation(current)


def ensure_extendable(current: VacationStatus) -> None:
    if current != VacationStatus.APPROVED:
        raise ConflictError(ErrorCode.CAN_ONLY_EXTEND_APPROVED, status=current.value)


def reserved_days(current: VacationStatus) -> bool:
    """Whether a vacation in ``current`` holds days in the ledger."""

    return current == VacationStatus.APPROVED

