from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError, ErrorCode
from ..database.connection import DatabaseConnection
from ..database.mysql_base import fetchall, fetchone, is_duplicate_key, lock_clause, to_decimal, tx_cursor
from ..database.unit_of_work import Transaction
from .model import AttendanceBreak, AttendanceRecord, Location
from .repository import AttendanceRepository

_RECORD_COLUMNS = """
    attendance_id, employee_id, work_date, clock_in_time, clock_out_time, status,
    total_break_minutes, total_hours,
    clock_in_latitude, clock_in_longitude, clock_in_accuracy, clock_in_address,
    clock_out_latitude, clock_out_longitude, clock_out_accuracy, clock_out_address
"""


def _float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def _location(r: Dict[str, Any], prefix: str) -> Optional[Location]:
    loc = Location(
        latitude=_float(r.get(f"{prefix}_latitude")),
        longitude=_float(r.get(f"{prefix}_longitude")),
        accuracy=_float(r.get(f"{prefix}_accuracy")),
        address=r.get(f"{prefix}_address"),
    )
    return None if loc.is_empty else loc


def _location_params(location: Optional[Location]) -> tuple:
    loc = location or Location()
    return (loc.latitude, loc.longitude, loc.accuracy, loc.address)


def _row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        clock_in_time=r["clock_in_time"],
        clock_out_time=r.get("clock_out_time"),
        status=AttendanceStatus(r["status"]),
        total_break_minutes=int(r.get("total_break_minutes") or 0),
        total_hours=to_decimal(r.get("total_hours")),
        clock_in_location=_location(r, "clock_in"),
        clock_out_location=_location(r, "clock_out"),
    )


def _row_to_break(r: Dict[str, Any]) -> AttendanceBreak:
    duration = r.get("duration_minutes")
    return AttendanceBreak(
        break_id=int(r["break_id"]),
        attendance_id=int(r["attendance_id"]),
        break_start=r["break_start"],
        break_end=r.get("break_end"),
        duration_minutes=int(duration) if duration is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(
        self,
        employee_id: int,
        work_date: date,
        *,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[AttendanceRecord]:
        with tx_cursor(self._conn_factory, tx) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s"
                + lock_clause(for_update),
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def create_clock_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_in_time: datetime,
        location: Optional[Location],
        tx: Transaction,
    ) -> int:
        try:
            tx.cursor.execute(
                """
                INSERT INTO attendance_records(
                    employee_id, work_date, clock_in_time, status, total_break_minutes,
                    clock_in_latitude, clock_in_longitude, clock_in_accuracy, clock_in_address,
                    created_at, updated_at
                )
                VALUES(%s,%s,%s,%s,0,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    work_date,
                    clock_in_time,
                    AttendanceStatus.CLOCKED_IN.value,
                    *_location_params(location),
                    clock_in_time,
                    clock_in_time,
                ),
            )
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError(ErrorCode.ALREADY_CLOCKED_IN) from e
            raise
        return int(tx.cursor.lastrowid)

    def get_open_break(
        self,
        attendance_id: int,
        *,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[AttendanceBreak]:
        with tx_cursor(self._conn_factory, tx) as (_, cur):
            cur.execute(
                """
                SELECT break_id, attendance_id, break_start, break_end, duration_minutes
                FROM attendance_breaks
                WHERE attendance_id=%s AND break_end IS NULL
                ORDER BY break_start DESC
                LIMIT 1
                """
                + lock_clause(for_update),
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _row_to_break(r) if r else None

    def open_break(self, attendance_id: int, *, break_start: datetime, tx: Transaction) -> int:
        try:
            tx.cursor.execute(
                "INSERT INTO attendance_breaks(attendance_id, break_start) VALUES(%s,%s)",
                (int(attendance_id), break_start),
            )
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError(ErrorCode.UNCLOSED_BREAK) from e
            raise
        return int(tx.cursor.lastrowid)

    def close_break(self, break_id: int, *, break_end: datetime, duration_minutes: int, tx: Transaction) -> None:
        tx.cursor.execute(
            "UPDATE attendance_breaks SET break_end=%s, duration_minutes=%s WHERE break_id=%s",
            (break_end, int(duration_minutes), int(break_id)),
        )

    def set_status(
        self,
        attendance_id: int,
        status: AttendanceStatus,
        *,
        now: datetime,
        tx: Transaction,
        total_break_minutes: Optional[int] = None,
    ) -> None:
        if total_break_minutes is None:
            tx.cursor.execute(
                "UPDATE attendance_records SET status=%s, updated_at=%s WHERE attendance_id=%s",
                (status.value, now, int(attendance_id)),
            )
            return
        tx.cursor.execute(
            """
            UPDATE attendance_records
            SET status=%s, total_break_minutes=%s, updated_at=%s
            WHERE attendance_id=%s
            """,
            (status.value, int(total_break_minutes), now, int(attendance_id)),
        )

    def clock_out(
        self,
        attendance_id: int,
        *,
        clock_out_time: datetime,
        total_hours: Decimal,
        location: Optional[Location],
        tx: Transaction,
    ) -> None:
        tx.cursor.execute(
            """
            UPDATE attendance_records
            SET clock_out_time=%s, total_hours=%s, status=%s,
                clock_out_latitude=%s, clock_out_longitude=%s, clock_out_accuracy=%s, clock_out_address=%s,
                updated_at=%s
            WHERE attendance_id=%s
            """,
            (
                clock_out_time,
                total_hours,
                AttendanceStatus.CLOCKED_OUT.value,
                *_location_params(location),
                clock_out_time,
                int(attendance_id),
            ),
        )

    def list_breaks(self, attendance_ids: Sequence[int]) -> Dict[int, List[AttendanceBreak]]:
        ids = [int(i) for i in attendance_ids]
        grouped: Dict[int, List[AttendanceBreak]] = {i: [] for i in ids}
        if not ids:
            return grouped
        placeholders = ",".join(["%s"] * len(ids))
        with tx_cursor(self._conn_factory, None) as (_, cur):
            cur.execute(
                f"""
                SELECT break_id, attendance_id, break_start, break_end, duration_minutes
                FROM attendance_breaks
                WHERE attendance_id IN ({placeholders})
                ORDER BY break_start
                """,
                tuple(ids),
            )
            for r in fetchall(cur):
                grouped[int(r["attendance_id"])].append(_row_to_break(r))
        return grouped

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
        clauses = ["employee_id=%s"]
        params: list[object] = [int(employee_id)]
        if start_date is not None:
            clauses.append("work_date>=%s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date<=%s")
            params.append(end_date)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        where = " AND ".join(clauses)

        with tx_cursor(self._conn_factory, None) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM attendance_records WHERE {where}", tuple(params))
            total = int((fetchone(cur) or {}).get("total") or 0)

            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY work_date DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            rows = [_row_to_record(r) for r in fetchall(cur)]
        return rows, total

    def totals_between(self, employee_id: int, start_date: date, end_date: date) -> Tuple[Decimal, int]:
        with tx_cursor(self._conn_factory, None) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(SUM(total_hours), 0) AS total_hours, COUNT(*) AS days_worked
                FROM attendance_records
                WHERE employee_id=%s AND status=%s AND work_date BETWEEN %s AND %s
                """,
                (int(employee_id), AttendanceStatus.CLOCKED_OUT.value, start_date, end_date),
            )
            r = fetchone(cur) or {}
            return to_decimal(r.get("total_hours")) or Decimal("0"), int(r.get("days_worked") or 0)
