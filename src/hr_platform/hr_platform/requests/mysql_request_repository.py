from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import (
    CancellationStatus,
    ExtensionStatus,
    SickLeaveStatus,
    VacationReason,
    VacationStatus,
    VacationType,
)
from ..database.connection import DatabaseConnection
from ..database.mysql_base import dump_urls, fetchall, fetchone, load_urls, lock_clause, tx_cursor
from ..database.unit_of_work import Transaction
from .model import SickLeaveRequest, VacationCancellationRequest, VacationExtensionRequest, VacationRequest
from .repository import CancellationRepository, ExtensionRepository, SickLeaveRepository, VacationRepository

_ACTIVE = ("PENDING", "APPROVED")


def _filters(alias: str, *, status, employee_id) -> tuple[str, list[object]]:
    clauses = ["1=1"]
    params: list[object] = []
    if status is not None:
        clauses.append(f"{alias}.status=%s")
        params.append(status.value)
    if employee_id is not None:
        clauses.append(f"{alias}.employee_id=%s")
        params.append(int(employee_id))
    return " AND ".join(clauses), params


def _limit_clause(limit: Optional[int], params: list[object]) -> str:
    # None lists every matching row
    if limit is None:
        return ""
    params.append(int(limit))
    return "LIMIT %s"


class _OverlapQuery:
    _table = ""
    _pk = ""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists_overlap(
        self,
        *,
        employee_id: int,
        departure_day: date,
        return_day: date,
        exclude_id: Optional[int] = None,
        tx: Optional[Transaction] = None,
    ) -> bool:
        # Closed intervals: existing.return >= new.departure AND existing.departure <= new.return
        sql = f"""
            SELECT 1 FROM {self._table}
            WHERE employee_id=%s
              AND status IN (%s, %s)
              AND return_day >= %s
              AND departure_day <= %s
        """
        params: list[object] = [int(employee_id), *_ACTIVE, departure_day, return_day]
        if exclude_id is not None:
            sql += f" AND {self._pk}<>%s"
            params.append(int(exclude_id))
        sql += " LIMIT 1"
        with tx_cursor(self._conn_factory, tx) as (_, cur):
            cur.execute(sql, tuple(params))
            return fetchone(cur) is not None


class MySQLVacationRepository(_OverlapQuery, VacationRepository):
    _table = "vacations"
    _pk = "vacation_id"

    _COLUMNS = """
        vacation_id, employee_id, departure_day, return_day, number_of_days,
        reason, type, description, attachment_urls, status, created_at, updated_at
    """

    @staticmethod
    def _row_to_model(r: dict) -> VacationRequest:
        return VacationRequest(
            vacation_id=int(r["vacation_id"]),
            employee_id=int(r["employee_id"]),
            departure_day=r["departure_day"],
            return_day=r["return_day"],
            number_of_days=int(r["number_of_days"]),
            reason=VacationReason(r["reason"]),
            vacation_type=VacationType(r["type"]),
            status=VacationStatus(r["status"]),
            created_at=r["created_at"],
            updated_at=r["updated_at"],
            description=r.get("description"),
            attachment_urls=tuple(load_urls(r.get("attachment_urls"))),
        )

    def create(
        self,
        *,
        employee_id: int,
        departure_day: date,
        return_day: date,
        number_of_days: int,
        reason: VacationReason,
        vacation_type: VacationType,
        description: Optional[str],
        attachment_urls: Sequence[str],
        now: datetime,
        tx: Optional[Transaction] = None,
    ) -> int:
        with tx_cursor(self._conn_factory, tx) as (_, cur):
            cur.execute(
                """
                INSERT INTO vacations(
                    employee_id, departure_day, return_day, number_of_days, reason, type,
                    description, attachment_urls, status, created_at, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    departure_day,
                    return_day,
                    int(number_of_days),
                    reason.value,
                    vacation_type.value,
                    description,
                    dump_urls(list(attachment_urls)),
                    VacationStatus.PENDING.value,
                    now,
                    now,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(
        self,
        vacation_id: int,
        *,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[VacationRequest]:
        with tx_cursor(self._conn_factory, tx) as (_, cur):
            cur.execute(
                f"SELECT {self._COLUMNS} FROM vacations WHERE vacation_id=%s" + lock_clause(for_update),
                (int(vacation_id),),
            )
            r = fetchone(cur)
            return self._row_to_model(r) if r else None

    def set_status(self, vacation_id: int, status: VacationStatus, *, now: datetime, tx: Transaction) -> None:
        tx.cursor.execute(
            "UPDATE vacations SET status=%s, updated_at=%s WHERE vacation_id=%s",
            (status.value, now, int(vacation_id)),
        )

    def extend(self, vacation_id: int, *, return_day: date, number_of_days: int, now: datetime, tx: Transaction) -> None:
        tx.cursor.execute(
            "UPDATE vacations SET return_day=%s, number_of_days=%s, updated_at=%s WHERE vacation_id=%s",
            (return_day, int(number_of_days), now, int(vacation_id)),
        )

    def list(
        self,
        *,
        status: Optional[VacationStatus] = None,
        employee_id: Optional[int] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[VacationRequest]:
        where, params = _filters("v", status=status, employee_id=employee_id)
        limit_sql = _limit_clause(limit, params)
        with tx_cursor(self._conn_factory, None) as (_, cur):
            cur.execute(
                f"""
                SELECT {self._COLUMNS}
                FROM vacations v
                WHERE {where}
                ORDER BY v.created_at DESC, v.vacation_id DESC
                {limit_sql}
                """,
                tuple(params),
            )
            return [self._row_to_model(r) for r in fetchall(cur)]


class MySQLSickLeaveRepository(_OverlapQuery, SickLeaveRepository):
    _table = "sick_leaves"
    _pk = "sick_leave_id"

    _COLUMNS = """
        sick_leave_id, employee_id, departure_day, return_day, number_of_days,
        reason, attachment_urls, status, created_at, updated_at
    """

    @staticmethod
    def _row_to_model(r: dict) -> SickLeaveRequest:
        return SickLeaveRequest(
            sick_leave_id=int(r["sick_leave_id"]),
            employee_id=int(r["employee_id"]),
            departure_day=r["departure_day"],
            return_day=r["return_day"],
            number_of_days=int(r["number_of_days"]),
            status=SickLeaveStatus(r["status"]),
            created_at=r["created_at"],
            updated_at=r["updated_at"],
            reason=r.get("reason"),
            attachment_urls=tuple(load_urls(r.get("attachment_urls"))),
        )

    def create(
        self,
        *,
        employee_id: int,
        departure_day: date,
        return_day: date,
        number_of_days: int,
        reason: Optional[str],
        attachment_urls: Sequence[str],
        now: datetime,
        tx: Optional[Transaction] = None,
    ) -> int:
        with tx_cursor(self._conn_factory, tx) as (_, cur):
            cur.execute(
                """
                INSERT INTO sick_leaves(
                    employee_id, departure_day, return_day, number_of_days,
                    reason, attachment_urls, status, created_at, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    departure_day,
                    return_day,
                    int(number_of_days),
                    reason,
                    dump_urls(list(attachment_urls)),
                    SickLeaveStatus.PENDING.value,
                    now,
                    now,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(
        self,
        sick_leave_id: int,
        *,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[SickLeaveRequest]:
        with tx_cursor(self._conn_factory, tx) as (_, cur):
            cur.execute(
                f"SELECT {self._COLUMNS} FROM sick_leaves WHERE sick_leave_id=%s" + lock_clause(for_update),
                (int(sick_leave_id),),
            )
            r = fetchone(cur)
            return self._row_to_model(r) if r else None

    def set_status(self, sick_leave_id: int, status: SickLeaveStatus, *, now: datetime, tx: Transaction) -> None:
        tx.cursor.execute(
            "UPDATE sick_leaves SET status=%s, updated_at=%s WHERE sick_leave_id=%s",
            (status.value, now, int(sick_leave_id)),
        )

    def list(
        self,
        *,
        status: Optional[SickLeaveStatus] = None,
        employee_id: Optional[int] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[SickLeaveRequest]:
        where, params = _filters("s", status=status, employee_id=employee_id)
        limit_sql = _limit_clause(limit, params)
        with tx_cursor(self._conn_factory, None) as (_, cur):
            cur.execute(
                f"""
                SELECT {self._COLUMNS}
                FROM sick_leaves s
                WHERE {where}
                ORDER BY s.created_at DESC, s.sick_leave_id DESC
                {limit_sql}
                """,
                tuple(params),
            )
            return [self._row_to_model(r) for r in fetchall(cur)]


class MySQLExtensionRepository(ExtensionRepository):
    _COLUMNS = """
        extension_id, vacation_id, employee_id, extend_to_date, additional_days,
        description, attachment_urls, status, created_at, updated_at
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _row_to_model(r: dict) -> VacationExtensionRequest:
        return VacationExtensionRequest(
            extension_id=int(r["extension_id"]),
            vacation_id=int(r["vacation_id"]),
            employee_id=int(r["employee_id"]),
            extend_to_date=r["extend_to_date"],
            additional_days=int(r["additional_days"]),
            status=ExtensionStatus(r["status"]),
            created_at=r["created_at"],
            updated_at=r["updated_at"],
            description=r.get("description"),
            attachment_urls=tuple(load_urls(r.get("attachment_urls"))),
        )

    def has_pending(self, vacation_id: int, *, tx: Optional[Transaction] = None) -> bool:
        with tx_cursor(self._conn_factory, tx) as (_, cur):
            cur.execute(
                "SELECT 1 FROM vacation_extension_requests WHERE vacation_id=%s AND status=%s LIMIT 1",
                (int(vacation_id), ExtensionStatus.PENDING.value),
            )
            return fetchone(cur) is not None

    def create(
        self,
        *,
        vacation_id: int,
        employee_id: int,
        extend_to_date: date,
        additional_days: int,
        description: Optional[str],
        attachment_urls: Sequence[str],
        now: datetime,
        tx: Optional[Transaction] = None,
    ) -> int:
        with tx_cursor(self._conn_factory, tx) as (_, cur):
            cur.execute(
                """
                INSERT INTO vacation_extension_requests(
                    vacation_id, employee_id, extend_to_date, additional_days,
                    description, attachment_urls, status, created_at, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(vacation_id),
                    int(employee_id),
                    extend_to_date,
                    int(additional_days),
                    description,
                    dump_urls(list(attachment_urls)),
                    ExtensionStatus.PENDING.value,
                    now,
                    now,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(
        self,
        extension_id: int,
        *,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[VacationExtensionRequest]:
        with tx_cursor(self._conn_factory, tx) as (_, cur):
            cur.execute(
                f"SELECT {self._COLUMNS} FROM vacation_extension_requests WHERE extension_id=%s"
                + lock_clause(for_update),
                (int(extension_id),),
            )
            r = fetchone(cur)
            return self._row_to_model(r) if r else None

    def set_status(self, extension_id: int, status: ExtensionStatus, *, now: datetime, tx: Transaction) -> None:
        tx.cursor.execute(
            "UPDATE vacation_extension_requests SET status=%s, updated_at=%s WHERE extension_id=%s",
            (status.value, now, int(extension_id)),
        )

    def list(
        self,
        *,
        status: Optional[ExtensionStatus] = None,
        employee_id: Optional[int] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[VacationExtensionRequest]:
        where, params = _filters("e", status=status, employee_id=employee_id)
        limit_sql = _limit_clause(limit, params)
        with tx_cursor(self._conn_factory, None) as (_, cur):
            cur.execute(
                f"""
                SELECT {self._COLUMNS}
                FROM vacation_extension_requests e
                WHERE {where}
                ORDER BY e.created_at DESC, e.extension_id DESC
                {limit_sql}
                """,
                tuple(params),
            )
            return [self._row_to_model(r) for r in fetchall(cur)]


class MySQLCancellationRepository(CancellationRepository):
    _COLUMNS = """
        cancellation_id, vacation_id, employee_id,
        description, attachment_urls, status, created_at, updated_at
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _row_to_model(r: dict) -> VacationCancellationRequest:
        return VacationCancellationRequest(
            cancellation_id=int(r["cancellation_id"]),
            vacation_id=int(r["vacation_id"]),
            employee_id=int(r["employee_id"]),
            status=CancellationStatus(r["status"]),
            created_at=r["created_at"],
            updated_at=r["updated_at"],
            description=r.get("description"),
            attachment_urls=tuple(load_urls(r.get("attachment_urls"))),
        )

    def has_pending(self, vacation_id: int, *, tx: Optional[Transaction] = None) -> bool:
        with tx_cursor(self._conn_factory, tx) as (_, cur):
            cur.execute(
                "SELECT 1 FROM vacation_cancellation_requests WHERE vacation_id=%s AND status=%s LIMIT 1",
                (int(vacation_id), CancellationStatus.PENDING.value),
            )
            return fetchone(cur) is not None

    def create(
        self,
        *,
        vacation_id: int,
        employee_id: int,
        description: Optional[str],
        attachment_urls: Sequence[str],
        now: datetime,
        tx: Optional[Transaction] = None,
    ) -> int:
        with tx_cursor(self._conn_factory, tx) as (_, cur):
            cur.execute(
                """
                INSERT INTO vacation_cancellation_requests(
                    vacation_id, employee_id, description, attachment_urls, status, created_at, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(vacation_id),
                    int(employee_id),
                    description,
                    dump_urls(list(attachment_urls)),
                    CancellationStatus.PENDING.value,
                    now,
                    now,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(
        self,
        cancellation_id: int,
        *,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[VacationCancellationRequest]:
        with tx_cursor(self._conn_factory, tx) as (_, cur):
            cur.execute(
                f"SELECT {self._COLUMNS} FROM vacation_cancellation_requests WHERE cancellation_id=%s"
                + lock_clause(for_update),
                (int(cancellation_id),),
            )
            r = fetchone(cur)
            return self._row_to_model(r) if r else None

    def set_status(self, cancellation_id: int, status: CancellationStatus, *, now: datetime, tx: Transaction) -> None:
        tx.cursor.execute(
            "UPDATE vacation_cancellation_requests SET status=%s, updated_at=%s WHERE cancellation_id=%s",
            (status.value, now, int(cancellation_id)),
        )

    def list(
        self,
        *,
        status: Optional[CancellationStatus] = None,
        employee_id: Optional[int] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[VacationCancellationRequest]:
        where, params = _filters("c", status=status, employee_id=employee_id)
        limit_sql = _limit_clause(limit, params)
        with tx_cursor(self._conn_factory, None) as (_, cur):
            cur.execute(
                f"""
                SELECT {self._COLUMNS}
                FROM vacation_cancellation_requests c
                WHERE {where}
                ORDER BY c.created_at DESC, c.cancellation_id DESC
                {limit_sql}
                """,
                tuple(params),
            )
            return [self._row_to_model(r) for r in fetchall(cur)]
