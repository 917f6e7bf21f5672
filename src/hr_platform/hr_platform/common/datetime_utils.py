from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from ..core.constants import HOURS_QUANTUM


def now_utc() -> datetime:
    """Current UTC time as a naive datetime (what MySQL DATETIME columns hold).

    Note: Wrapped so tests can pass/patch a fixed clock easily.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def rounded_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, rounded half-up."""
    seconds = Decimal(str((end - start).total_seconds()))
    return int((seconds / 60).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def elapsed_minutes(start: datetime, end: datetime) -> Decimal:
    """Exact (fractional) minutes between two instants."""
    return Decimal(str((end - start).total_seconds())) / 60


def minutes_to_hours(minutes: Decimal | int) -> Decimal:
    """Convert minutes to hours rounded to 2 decimals, never negative."""
    hours = (Decimal(minutes) / 60).quantize(Decimal(HOURS_QUANTUM), rounding=ROUND_HALF_UP)
    if hours <= 0:
        return Decimal("0.00")
    return hours
