from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class Location:
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    accuracy: Optional[float] = None
    address: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.latitude is None and self.longitude is None and self.accuracy is None and not self.address


@dataclass(frozen=True)
class AttendanceBreak:
    break_id: int
    attendance_id: int
    break_start: datetime
    break_end: Optional[datetime] = None
    duration_minutes: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.break_end is None


@dataclass(frozen=True)
class AttendanceRecord:
    """One employee's clock for one UTC day."""

    attendance_id: int
    employee_id: int
    work_date: date
    clock_in_time: datetime
    status: AttendanceStatus
    total_break_minutes: int = 0
    clock_out_time: Optional[datetime] = None
    total_hours: Optional[Decimal] = None
    clock_in_location: Optional[Location] = None
    clock_out_location: Optional[Location] = None
    breaks: tuple[AttendanceBreak, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class TodayStatus:
    attendance: Optional[AttendanceRecord]
    active_break: Optional[AttendanceBreak] = None
    current_break_minutes: Optional[int] = None
    current_working_hours: Optional[Decimal] = None


@dataclass(frozen=True)
class PeriodHours:
    start_date: date
    end_date: date
    total_hours: Decimal
    days_worked: int
    average_hours_per_day: Decimal

