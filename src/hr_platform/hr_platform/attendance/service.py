"""Per-employee, per-UTC-day attendance clock.

    absent -> CLOCKED_IN <-> ON_BREAK
              CLOCKED_IN -> CLOCKED_OUT (terminal for the day)

Every event runs in one atomic unit that locks the day's record first, so a
break can't be opened or closed concurrently with another event on that day.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import replace
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Optional

from ..common.date_range import parse_date
from ..common.datetime_utils import elapsed_minutes, minutes_to_hours, now_utc, rounded_minutes
from ..common.pagination import Page, offset_for
from ..common.validators import optional_text, require_enum, require_int, require_pagination
from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, HOURS_QUANTUM
from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError, ErrorCode, NotFoundError, ValidationError
from ..database.unit_of_work import Transaction, UnitOfWork
from ..employees.repository import EmployeeDirectory
from ..employees.service import require_active_employee
from .model import AttendanceRecord, Location, PeriodHours, TodayStatus
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _coordinate(value: Any, field_name: str, bound: float) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(ErrorCode.INVALID_INPUT, field=field_name)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(ErrorCode.INVALID_INPUT, field=field_name)
    if not -bound <= number <= bound:
        raise ValidationError(ErrorCode.INVALID_INPUT, field=field_name)
    return number


def parse_location(data: Optional[Mapping[str, Any]]) -> Optional[Location]:
    """Optional GPS fix sent with clock-in/clock-out."""

    if not data:
        return None
    if not isinstance(data, Mapping):
        raise ValidationError(ErrorCode.INVALID_INPUT, field="location")
    accuracy = _coordinate(data.get("accuracy"), "accuracy", float("inf"))
    if accuracy is not None and accuracy < 0:
        raise ValidationError(ErrorCode.INVALID_INPUT, field="accuracy")
    location = Location(
        latitude=_coordinate(data.get("latitude"), "latitude", 90),
        longitude=_coordinate(data.get("longitude"), "longitude", 180),
        accuracy=accuracy,
        address=optional_text(data.get("address"), "address"),
    )
    return None if location.is_empty else location


class AttendanceClock:
    def __init__(self, attendance: AttendanceRepository, employees: EmployeeDirectory, uow: UnitOfWork):
        self._attendance = attendance
        self._employees = employees
        self._uow = uow

    def _locked_record(self, tx: Transaction, employee_id: int, today: date) -> AttendanceRecord:
        record = self._attendance.get_for_employee_and_date(employee_id, today, tx=tx, for_update=True)
        if record is None:
            raise NotFoundError(ErrorCode.NO_CLOCK_IN_FOUND)
        if record.status == AttendanceStatus.CLOCKED_OUT:
            raise ConflictError(ErrorCode.ALREADY_CLOCKED_OUT)
        return record

    def _reload(self, employee_id: int, today: date) -> AttendanceRecord:
        record = self._attendance.get_for_employee_and_date(employee_id, today)
        if record is None:
            raise NotFoundError(ErrorCode.NO_CLOCK_IN_FOUND)
        breaks = self._attendance.list_breaks([record.attendance_id]).get(record.attendance_id, [])
        return replace(record, breaks=tuple(breaks))

    def clock_in(
        self,
        employee_id: int,
        *,
        location: Optional[Location] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or now_utc()
        today = now.date()

        with self._uow.atomic() as tx:
            # Lock order: employee row, then the day's record.
            require_active_employee(self._employees, employee_id, tx=tx, for_update=True)
            existing = self._attendance.get_for_employee_and_date(employee_id, today, tx=tx, for_update=True)
            if existing is not None:
                if existing.status == AttendanceStatus.CLOCKED_OUT:
                    raise ConflictError(ErrorCode.ALREADY_CLOCKED_OUT)
                raise ConflictError(ErrorCode.ALREADY_CLOCKED_IN)

            # UNIQUE(employee_id, work_date) backs this up for concurrent clock-ins.
            self._attendance.create_clock_in(
                employee_id=int(employee_id),
                work_date=today,
                clock_in_time=now,
                location=location,
                tx=tx,
            )

        logger.info("Employee %s clocked in at %s", employee_id, now.isoformat())
        return self._reload(employee_id, today)

    def take_break(self, employee_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_utc()
        today = now.date()

        with self._uow.atomic() as tx:
            record = self._locked_record(tx, employee_id, today)
            if record.status == AttendanceStatus.ON_BREAK:
                raise ConflictError(ErrorCode.ALREADY_ON_BREAK)
            if self._attendance.get_open_break(record.attendance_id, tx=tx, for_update=True) is not None:
                raise ConflictError(ErrorCode.UNCLOSED_BREAK)

            self._attendance.open_break(record.attendance_id, break_start=now, tx=tx)
            self._attendance.set_status(record.attendance_id, AttendanceStatus.ON_BREAK, now=now, tx=tx)

        logger.info("Employee %s started a break", employee_id)
        return self._reload(employee_id, today)

    def back_to_work(self, employee_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_utc()
        today = now.date()

        with self._uow.atomic() as tx:
            record = self._locked_record(tx, employee_id, today)
            if record.status == AttendanceStatus.CLOCKED_IN:
                raise ConflictError(ErrorCode.NOT_ON_BREAK)
            open_break = self._attendance.get_open_break(record.attendance_id, tx=tx, for_update=True)
            if open_break is None:
                raise ConflictError(ErrorCode.NOT_ON_BREAK)

            duration = rounded_minutes(open_break.break_start, now)
            self._attendance.close_break(open_break.break_id, break_end=now, duration_minutes=duration, tx=tx)
            self._attendance.set_status(
                record.attendance_id,
                AttendanceStatus.CLOCKED_IN,
                now=now,
                tx=tx,
                total_break_minutes=record.total_break_minutes + duration,
            )

        logger.info("Employee %s back to work after %s minute(s)", employee_id, duration)
        return self._reload(employee_id, today)

    def clock_out(
        self,
        employee_id: int,
        *,
        location: Optional[Location] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or now_utc()
        today = now.date()

        with self._uow.atomic() as tx:
            record = self._locked_record(tx, employee_id, today)
            if record.status == AttendanceStatus.ON_BREAK:
                raise ConflictError(ErrorCode.CANNOT_CLOCK_OUT_ON_BREAK)
            if self._attendance.get_open_break(record.attendance_id, tx=tx, for_update=True) is not None:
                raise ConflictError(ErrorCode.UNCLOSED_BREAK)

            worked = elapsed_minutes(record.clock_in_time, now) - record.total_break_minutes
            total_hours = minutes_to_hours(worked)
            self._attendance.clock_out(
                record.attendance_id,
                clock_out_time=now,
                total_hours=total_hours,
                location=location,
                tx=tx,
            )

        logger.info("Employee %s clocked out (%s h)", employee_id, total_hours)
        return self._reload(employee_id, today)

    def get_today_status(self, employee_id: int, *, now: Optional[datetime] = None) -> TodayStatus:
        now = now or now_utc()

        record = self._attendance.get_for_employee_and_date(employee_id, now.date())
        if record is None:
            return TodayStatus(attendance=None)

        breaks = self._attendance.list_breaks([record.attendance_id]).get(record.attendance_id, [])
        record = replace(record, breaks=tuple(breaks))
        active = next((b for b in reversed(breaks) if b.is_open), None)

        current_break_minutes = int(elapsed_minutes(active.break_start, now)) if active else None
        if record.status == AttendanceStatus.CLOCKED_OUT:
            working_hours = None
        else:
            worked = elapsed_minutes(record.clock_in_time, now) - record.total_break_minutes
            if active is not None and record.status == AttendanceStatus.ON_BREAK:
                worked -= elapsed_minutes(active.break_start, now)
            working_hours = minutes_to_hours(worked)

        return TodayStatus(
            attendance=record,
            active_break=active,
            current_break_minutes=current_break_minutes,
            current_working_hours=working_hours,
        )

    def get_period_hours(self, employee_id: int, start: object, end: object) -> PeriodHours:
        start_date = parse_date(start, field="start_date")
        end_date = parse_date(end, field="end_date")
        if start_date > end_date:
            raise ValidationError(ErrorCode.INVALID_DATE_RANGE)

        total, days = self._attendance.totals_between(int(employee_id), start_date, end_date)
        quantum = Decimal(HOURS_QUANTUM)
        total = Decimal(total).quantize(quantum, rounding=ROUND_HALF_UP)
        average = (total / days).quantize(quantum, rounding=ROUND_HALF_UP) if days else Decimal("0.00")
        return PeriodHours(
            start_date=start_date,
            end_date=end_date,
            total_hours=total,
            days_worked=days,
            average_hours_per_day=average,
        )

    def get_history(
        self,
        employee_id: int,
        *,
        start_date: object = None,
        end_date: object = None,
        month: object = None,
        year: object = None,
        status: object = None,
        page: object = DEFAULT_PAGE,
        limit: object = DEFAULT_PAGE_SIZE,
    ) -> Page[AttendanceRecord]:
        page_no, page_size = require_pagination(page, limit)
        first, last = _history_range(start_date, end_date, month, year)
        status_filter = require_enum(AttendanceStatus, status, "status") if status else None

        rows, total = self._attendance.list_for_employee(
            int(employee_id),
            start_date=first,
            end_date=last,
            status=status_filter,
            offset=offset_for(page_no, page_size),
            limit=page_size,
        )
        breaks = self._attendance.list_breaks([r.attendance_id for r in rows])
        items = [replace(r, breaks=tuple(breaks.get(r.attendance_id, []))) for r in rows]
        return Page(items=items, total=total, page=page_no, limit=page_size)


def _history_range(start_date: object, end_date: object, month: object, year: object):
    """Resolve start/end, month+year or year into an inclusive date range."""

    if start_date or end_date:
        if not (start_date and end_date):
            raise ValidationError(ErrorCode.INVALID_INPUT, field="end_date" if start_date else "start_date")
        first = parse_date(start_date, field="start_date")
        last = parse_date(end_date, field="end_date")
        if first > last:
            raise ValidationError(ErrorCode.INVALID_DATE_RANGE)
        return first, last

    if month:
        if not year:
            raise ValidationError(ErrorCode.INVALID_INPUT, field="year")
        y = require_int(year, "year", minimum=1900, maximum=9999)
        m = require_int(month, "month", minimum=1, maximum=12)
        return date(y, m, 1), date(y, m, calendar.monthrange(y, m)[1])

    if year:
        y = require_int(year, "year", minimum=1900, maximum=9999)
        return date(y, 1, 1), date(y, 12, 31)

    return None, None
