from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import pytest

from src.hr_platform.hr_platform.attendance.model import AttendanceBreak, AttendanceRecord
from src.hr_platform.hr_platform.common.date_range import ranges_overlap
from src.hr_platform.hr_platform.container import wire
from src.hr_platform.hr_platform.core.enums import (
    AttendanceStatus,
    CancellationStatus,
    EmployeeStatus,
    ExtensionStatus,
    SickLeaveStatus,
    VacationStatus,
)
from src.hr_platform.hr_platform.core.exceptions import ConflictError, ErrorCode
from src.hr_platform.hr_platform.database.unit_of_work import Transaction
from src.hr_platform.hr_platform.employees.model import Employee
from src.hr_platform.hr_platform.ledger.model import LeaveBalance
from src.hr_platform.hr_platform.requests.model import (
    SickLeaveRequest,
    VacationCancellationRequest,
    VacationExtensionRequest,
    VacationRequest,
)

_ACTIVE_REQUEST = ("PENDING", "APPROVED")


class InMemoryStore:
    """All tables of the fake database. Snapshot/restore gives rollback."""

    def __init__(self):
        self.employees: dict[int, Employee] = {}
        self.vacations: dict[int, VacationRequest] = {}
        self.sick_leaves: dict[int, SickLeaveRequest] = {}
        self.extensions: dict[int, VacationExtensionRequest] = {}
        self.cancellations: dict[int, VacationCancellationRequest] = {}
        self.records: dict[int, AttendanceRecord] = {}
        self.breaks: dict[int, AttendanceBreak] = {}
        self.next_id = 1
        self.lock_log: list[tuple[str, int]] = []

    def new_id(self) -> int:
        value = self.next_id
        self.next_id += 1
        return value

    def add_employee(
        self,
        employee_id: int,
        *,
        total: str = "30",
        used: str = "0",
        status: EmployeeStatus = EmployeeStatus.ACTIVE,
        name: str = "Employee",
    ) -> Employee:
        employee = Employee(
            employee_id=employee_id,
            name=name,
            status=status,
            total_vacation_days=Decimal(total),
            used_vacation_days=Decimal(used),
        )
        self.employees[employee_id] = employee
        return employee

    def snapshot(self) -> dict:
        return copy.deepcopy({k: v for k, v in self.__dict__.items() if k != "lock_log"})

    def restore(self, state: dict) -> None:
        self.__dict__.update(state)


class FakeUnitOfWork:
    def __init__(self, store: InMemoryStore):
        self._store = store
        self.commits = 0
        self.rollbacks = 0

    @contextmanager
    def atomic(self):
        state = self._store.snapshot()
        try:
            yield Transaction(conn=None, cursor=None)
        except Exception:
            self._store.restore(state)
            self.rollbacks += 1
            raise
        self.commits += 1


def _require_tx(tx) -> None:
    assert tx is not None, "mutation outside an atomic unit"


class FakeEmployees:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, employee_id, *, tx=None, for_update=False) -> Optional[Employee]:
        if for_update:
            self._s.lock_log.append(("employee", int(employee_id)))
        return self._s.employees.get(int(employee_id))

    def is_active(self, employee_id) -> bool:
        employee = self._s.employees.get(int(employee_id))
        return bool(employee and employee.is_active)


class FakeLedger:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_balance(self, employee_id, *, tx=None, for_update=False) -> Optional[LeaveBalance]:
        if for_update:
            self._s.lock_log.append(("employee", int(employee_id)))
        e = self._s.employees.get(int(employee_id))
        if e is None:
            return None
        return LeaveBalance(employee_id=e.employee_id, total_days=e.total_vacation_days, used_days=e.used_vacation_days)

    def add_used_days(self, employee_id, delta, *, tx) -> None:
        _require_tx(tx)
        e = self._s.employees[int(employee_id)]
        self._s.employees[e.employee_id] = replace(e, used_vacation_days=e.used_vacation_days + Decimal(delta))


def _newest_first(rows, *, status, employee_id, limit, id_attr):
    out = [
        r
        for r in rows
        if (status is None or r.status == status) and (employee_id is None or r.employee_id == int(employee_id))
    ]
    out.sort(key=lambda r: (r.created_at, getattr(r, id_attr)), reverse=True)
    return out[:limit]


class _FakeRangeRepo:
    _table = ""
    _id_attr = ""
    _lock_name = ""

    def __init__(self, store: InMemoryStore):
        self._s = store

    @property
    def _rows(self) -> dict:
        return getattr(self._s, self._table)

    def exists_overlap(self, *, employee_id, departure_day, return_day, exclude_id=None, tx=None) -> bool:
        for r in self._rows.values():
            if r.employee_id != int(employee_id) or r.status.value not in _ACTIVE_REQUEST:
                continue
            if exclude_id is not None and getattr(r, self._id_attr) == exclude_id:
                continue
            if ranges_overlap(r.departure_day, r.return_day, departure_day, return_day):
                return True
        return False

    def get_by_id(self, request_id, *, tx=None, for_update=False):
        if for_update:
            self._s.lock_log.append((self._lock_name, int(request_id)))
        return self._rows.get(int(request_id))

    def set_status(self, request_id, status, *, now, tx) -> None:
        _require_tx(tx)
        r = self._rows[int(request_id)]
        self._rows[int(request_id)] = replace(r, status=status, updated_at=now)

    def list(self, *, status=None, employee_id=None, limit=200):
        return _newest_first(self._rows.values(), status=status, employee_id=employee_id, limit=limit, id_attr=self._id_attr)


class FakeVacations(_FakeRangeRepo):
    _table = "vacations"
    _id_attr = "vacation_id"
    _lock_name = "vacation"

    def create(
        self,
        *,
        employee_id,
        departure_day,
        return_day,
        number_of_days,
        reason,
        vacation_type,
        description,
        attachment_urls,
        now,
        tx=None,
    ) -> int:
        vid = self._s.new_id()
        self._s.vacations[vid] = VacationRequest(
            vacation_id=vid,
            employee_id=int(employee_id),
            departure_day=departure_day,
            return_day=return_day,
            number_of_days=int(number_of_days),
            reason=reason,
            vacation_type=vacation_type,
            status=VacationStatus.PENDING,
            created_at=now,
            updated_at=now,
            description=description,
            attachment_urls=tuple(attachment_urls),
        )
        return vid

    def extend(self, vacation_id, *, return_day, number_of_days, now, tx) -> None:
        _require_tx(tx)
        v = self._s.vacations[int(vacation_id)]
        self._s.vacations[v.vacation_id] = replace(v, return_day=return_day, number_of_days=number_of_days, updated_at=now)


class FakeSickLeaves(_FakeRangeRepo):
    _table = "sick_leaves"
    _id_attr = "sick_leave_id"
    _lock_name = "sick_leave"

    def create(self, *, employee_id, departure_day, return_day, number_of_days, reason, attachment_urls, now, tx=None) -> int:
        sid = self._s.new_id()
        self._s.sick_leaves[sid] = SickLeaveRequest(
            sick_leave_id=sid,
            employee_id=int(employee_id),
            departure_day=departure_day,
            return_day=return_day,
            number_of_days=int(number_of_days),
            status=SickLeaveStatus.PENDING,
            created_at=now,
            updated_at=now,
            reason=reason,
            attachment_urls=tuple(attachment_urls),
        )
        return sid


class _FakeVacationChildRepo:
    _table = ""
    _id_attr = ""
    _lock_name = ""
    _pending = None

    def __init__(self, store: InMemoryStore):
        self._s = store

    @property
    def _rows(self) -> dict:
        return getattr(self._s, self._table)

    def has_pending(self, vacation_id, *, tx=None) -> bool:
        return any(r.vacation_id == int(vacation_id) and r.status == self._pending for r in self._rows.values())

    def get_by_id(self, request_id, *, tx=None, for_update=False):
        if for_update:
            self._s.lock_log.append((self._lock_name, int(request_id)))
        return self._rows.get(int(request_id))

    def set_status(self, request_id, status, *, now, tx) -> None:
        _require_tx(tx)
        r = self._rows[int(request_id)]
        self._rows[int(request_id)] = replace(r, status=status, updated_at=now)

    def list(self, *, status=None, employee_id=None, limit=200):
        return _newest_first(self._rows.values(), status=status, employee_id=employee_id, limit=limit, id_attr=self._id_attr)


class FakeExtensions(_FakeVacationChildRepo):
    _table = "extensions"
    _id_attr = "extension_id"
    _lock_name = "extension"
    _pending = ExtensionStatus.PENDING

    def create(self, *, vacation_id, employee_id, extend_to_date, additional_days, description, attachment_urls, now, tx=None) -> int:
        eid = self._s.new_id()
        self._s.extensions[eid] = VacationExtensionRequest(
            extension_id=eid,
            vacation_id=int(vacation_id),
            employee_id=int(employee_id),
            extend_to_date=extend_to_date,
            additional_days=int(additional_days),
            status=ExtensionStatus.PENDING,
            created_at=now,
            updated_at=now,
            description=description,
            attachment_urls=tuple(attachment_urls),
        )
        return eid


class FakeCancellations(_FakeVacationChildRepo):
    _table = "cancellations"
    _id_attr = "cancellation_id"
    _lock_name = "cancellation"
    _pending = CancellationStatus.PENDING

    def create(self, *, vacation_id, employee_id, description, attachment_urls, now, tx=None) -> int:
        cid = self._s.new_id()
        self._s.cancellations[cid] = VacationCancellationRequest(
            cancellation_id=cid,
            vacation_id=int(vacation_id),
            employee_id=int(employee_id),
            status=CancellationStatus.PENDING,
            created_at=now,
            updated_at=now,
            description=description,
            attachment_urls=tuple(attachment_urls),
        )
        return cid


class FakeAttendance:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_for_employee_and_date(self, employee_id, work_date: date, *, tx=None, for_update=False):
        for r in self._s.records.values():
            if r.employee_id == int(employee_id) and r.work_date == work_date:
                if for_update:
                    self._s.lock_log.append(("attendance", r.attendance_id))
                return r
        return None

    def create_clock_in(self, *, employee_id, work_date, clock_in_time, location, tx) -> int:
        _require_tx(tx)
        if self.get_for_employee_and_date(employee_id, work_date) is not None:
            raise ConflictError(ErrorCode.ALREADY_CLOCKED_IN)
        aid = self._s.new_id()
        self._s.records[aid] = AttendanceRecord(
            attendance_id=aid,
            employee_id=int(employee_id),
            work_date=work_date,
            clock_in_time=clock_in_time,
            status=AttendanceStatus.CLOCKED_IN,
            clock_in_location=location,
        )
        return aid

    def get_open_break(self, attendance_id, *, tx=None, for_update=False):
        for b in self._s.breaks.values():
            if b.attendance_id == int(attendance_id) and b.break_end is None:
                return b
        return None

    def open_break(self, attendance_id, *, break_start: datetime, tx) -> int:
        _require_tx(tx)
        if self.get_open_break(attendance_id) is not None:
            raise ConflictError(ErrorCode.UNCLOSED_BREAK)
        bid = self._s.new_id()
        self._s.breaks[bid] = AttendanceBreak(break_id=bid, attendance_id=int(attendance_id), break_start=break_start)
        return bid

    def close_break(self, break_id, *, break_end, duration_minutes, tx) -> None:
        _require_tx(tx)
        b = self._s.breaks[int(break_id)]
        self._s.breaks[b.break_id] = replace(b, break_end=break_end, duration_minutes=int(duration_minutes))

    def set_status(self, attendance_id, status, *, now, tx, total_break_minutes=None) -> None:
        _require_tx(tx)
        r = self._s.records[int(attendance_id)]
        changes = {"status": status}
        if total_break_minutes is not None:
            changes["total_break_minutes"] = int(total_break_minutes)
        self._s.records[r.attendance_id] = replace(r, **changes)

    def clock_out(self, attendance_id, *, clock_out_time, total_hours, location, tx) -> None:
        _require_tx(tx)
        r = self._s.records[int(attendance_id)]
        self._s.records[r.attendance_id] = replace(
            r,
            clock_out_time=clock_out_time,
            total_hours=total_hours,
            status=AttendanceStatus.CLOCKED_OUT,
            clock_out_location=location,
        )

    def list_breaks(self, attendance_ids):
        grouped = {int(i): [] for i in attendance_ids}
        for b in sorted(self._s.breaks.values(), key=lambda b: b.break_start):
            if b.attendance_id in grouped:
                grouped[b.attendance_id].append(b)
        return grouped

    def list_for_employee(self, employee_id, *, start_date=None, end_date=None, status=None, offset=0, limit=20):
        rows = [
            r
            for r in self._s.records.values()
            if r.employee_id == int(employee_id)
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
            and (status is None or r.status == status)
        ]
        rows.sort(key=lambda r: r.work_date, reverse=True)
        return rows[offset : offset + limit], len(rows)

    def totals_between(self, employee_id, start_date, end_date):
        rows = [
            r
            for r in self._s.records.values()
            if r.employee_id == int(employee_id)
            and r.status == AttendanceStatus.CLOCKED_OUT
            and start_date <= r.work_date <= end_date
        ]
        return sum((r.total_hours or Decimal("0") for r in rows), Decimal("0")), len(rows)


@pytest.fixture()
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture()
def uow(store) -> FakeUnitOfWork:
    return FakeUnitOfWork(store)


@pytest.fixture()
def container(store, uow):
    return wire(
        uow=uow,
        employees_repo=FakeEmployees(store),
        ledger_repo=FakeLedger(store),
        vacations_repo=FakeVacations(store),
        sick_leaves_repo=FakeSickLeaves(store),
        extensions_repo=FakeExtensions(store),
        cancellations_repo=FakeCancellations(store),
        attendance_repo=FakeAttendance(store),
    )
