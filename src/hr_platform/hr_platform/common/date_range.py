"""Date-range rules shared by every leave request kind.

All dates are UTC calendar days. Ranges are closed intervals: both the
departure day and the return day are leave days, so two ranges that share a
boundary day overlap.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional, Protocol

from ..core.exceptions import ConflictError, ErrorCode, ValidationError


class OverlapChecker(Protocol):
    def exists_overlap(
        self,
        *,
        employee_id: int,
        departure_day: date,
        return_day: date,
        exclude_id: Optional[int] = None,
    ) -> bool:
        """True if a PENDING/APPROVED request of the same kind intersects the range."""

        raise NotImplementedError


def parse_date(value: object, *, field: str = "date") -> date:
    """Parse a calendar day from a date, datetime or ISO-8601 string."""

    if isinstance(value, datetime):
        return normalize_to_utc_day(value)
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(ErrorCode.INVALID_DATE, field=field)

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(ErrorCode.INVALID_DATE, field=field)
    return normalize_to_utc_day(parsed)


def normalize_to_utc_day(value: date | datetime) -> date:
    """Strip the time of day. Aware datetimes are converted to UTC first."""

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def assert_departure_not_after_return(departure_day: date, return_day: date) -> None:
    if departure_day > return_day:
        raise ValidationError(ErrorCode.RETURN_BEFORE_DEPARTURE)


def inclusive_days(departure_day: date, return_day: date) -> int:
    """Number of calendar days in [departure_day, return_day]."""

    return (return_day - departure_day).days + 1


def assert_day_count_matches(declared: int, computed: int) -> None:
    if int(declared) != int(computed):
        raise ValidationError(ErrorCode.DAY_COUNT_MISMATCH, declared=declared, computed=computed)


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    return a_end >= b_start and a_start <= b_end


def assert_no_overlap(
    checker: OverlapChecker,
    employee_id: int,
    departure_day: date,
    return_day: date,
    exclude_id: Optional[int] = None,
    **query: object,
) -> None:
    """``query`` is passed through to the checker (e.g. ``tx=``)."""

    if checker.exists_overlap(
        employee_id=int(employee_id),
        departure_day=departure_day,
        return_day=return_day,
        exclude_id=exclude_id,
        **query,
    ):
        raise ConflictError(ErrorCode.OVERLAP_CONFLICT)


def day_after(value: date) -> date:
    return value + timedelta(days=1)


def validated_range(departure: object, returning: object) -> tuple[date, date]:
    """Parse + normalize + order-check a (departure, return) pair."""

    departure_day = parse_date(departure, field="departure_day")
    return_day = parse_date(returning, field="return_day")
    assert_departure_not_after_return(departure_day, return_day)
    return departure_day, return_day
