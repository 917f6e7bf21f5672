from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from ..core.enums import AttendanceStatus
from ..database.unit_of_work import Transaction
from .model import AttendanceBreak, AttendanceRecord, Location


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(
        self,
        employee_id: int,
        work_date: date,
        *,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_in_time: datetime,
        location: Optional[Location],
        tx: Transaction,
    ) -> int:
        """Raises ``ConflictError(AlreadyClockedIn)`` if the day already has a record."""

        raise NotImplementedError

    def get_open_break(
        self,
        attendance_id: int,
        *,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[AttendanceBreak]:
        raise NotImplementedError

    def open_break(self, attendance_id: int, *, break_start: datetime, tx: Transaction) -> int:
        """Raises ``ConflictError(UnclosedBreak)`` if an open break already exists."""

        raise NotImplementedError

    def close_break(self, break_id: int, *, break_end: datetime, duration_minutes: int, tx: Transaction) -> None:
        raise NotImplementedError

    def set_status(
        self,
        attendance_id: int,
        status: AttendanceStatus,
        *,
        now: datetime,
        tx: Transaction,
        total_break_minutes: Optional[int] = None,
    ) -> None:
        raise NotImplementedError

    def clock_out(
        self,
        attendance_id: int,
        *,
        clock_out_time: datetime,
        total_hours: Decimal,
        location: Optional[Location],
        tx: Transaction,
    ) -> None:
        raise NotImplementedError

    def list_breaks(self, attendance_ids: Sequence[int]) -> Dict[int, List[AttendanceBreak]]:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Tuple[List[AttendanceRecord], int]:
        """Records ordered by work_date desc, plus the unpaged total."""

        raise NotImplementedError

    def totals_between(self, employee_id: int, start_date: date, end_date: date) -> Tuple[Decimal, int]:
        """Sum of total_hours and count of CLOCKED_OUT days in [start_date, end_date]."""

        raise NotImplementedError
