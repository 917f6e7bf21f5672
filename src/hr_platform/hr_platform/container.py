from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceClock
from .core.constants import DEFAULT_TX_ISOLATION_LEVEL
from .database.connection import DBConfig, DatabaseConnection
from .database.unit_of_work import MySQLUnitOfWork, UnitOfWork
from .employees.mysql_employee_repository import MySQLEmployeeDirectory
from .employees.repository import EmployeeDirectory
from .ledger.mysql_ledger_repository import MySQLLedgerRepository
from .ledger.repository import LedgerRepository
from .ledger.service import LeaveBalanceLedger
from .requests.cancellation_service import VacationCancellationWorkflow
from .requests.extension_service import VacationExtensionWorkflow
from .requests.mysql_request_repository import (
    MySQLCancellationRepository,
    MySQLExtensionRepository,
    MySQLSickLeaveRepository,
    MySQLVacationRepository,
)
from .requests.repository import (
    CancellationRepository,
    ExtensionRepository,
    SickLeaveRepository,
    VacationRepository,
)
from .requests.sick_leave_service import SickLeaveRequestWorkflow
from .requests.unified_service import RequestService
from .requests.vacation_service import VacationRequestWorkflow


@dataclass(frozen=True)
class Container:
    uow: UnitOfWork

    employees_repo: EmployeeDirectory
    ledger_repo: LedgerRepository
    vacations_repo: VacationRepository
    sick_leaves_repo: SickLeaveRepository
    extensions_repo: ExtensionRepository
    cancellations_repo: CancellationRepository
    attendance_repo: AttendanceRepository

    ledger: LeaveBalanceLedger
    vacation_workflow: VacationRequestWorkflow
    sick_leave_workflow: SickLeaveRequestWorkflow
    extension_workflow: VacationExtensionWorkflow
    cancellation_workflow: VacationCancellationWorkflow
    request_service: RequestService
    attendance_clock: AttendanceClock


def wire(
    *,
    uow: UnitOfWork,
    employees_repo: EmployeeDirectory,
    ledger_repo: LedgerRepository,
    vacations_repo: VacationRepository,
    sick_leaves_repo: SickLeaveRepository,
    extensions_repo: ExtensionRepository,
    cancellations_repo: CancellationRepository,
    attendance_repo: AttendanceRepository,
) -> Container:
    """Build services on top of any set of repositories (MySQL or in-memory)."""

    ledger = LeaveBalanceLedger(ledger_repo)
    vacation_workflow = VacationRequestWorkflow(vacations_repo, employees_repo, ledger, uow)
    sick_leave_workflow = SickLeaveRequestWorkflow(sick_leaves_repo, employees_repo, uow)
    extension_workflow = VacationExtensionWorkflow(extensions_repo, vacations_repo, ledger, uow)
    cancellation_workflow = VacationCancellationWorkflow(cancellations_repo, vacations_repo, ledger, uow)
    request_service = RequestService(
        vacation_workflow,
        sick_leave_workflow,
        extension_workflow,
        cancellation_workflow,
        ledger,
    )
    attendance_clock = AttendanceClock(attendance_repo, employees_repo, uow)

    return Container(
        uow=uow,
        employees_repo=employees_repo,
        ledger_repo=ledger_repo,
        vacations_repo=vacations_repo,
        sick_leaves_repo=sick_leaves_repo,
        extensions_repo=extensions_repo,
        cancellations_repo=cancellations_repo,
        attendance_repo=attendance_repo,
        ledger=ledger,
        vacation_workflow=vacation_workflow,
        sick_leave_workflow=sick_leave_workflow,
        extension_workflow=extension_workflow,
        cancellation_workflow=cancellation_workflow,
        request_service=request_service,
        attendance_clock=attendance_clock,
    )


def build_container(*, db_config: dict, isolation_level: str = DEFAULT_TX_ISOLATION_LEVEL) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config, isolation_level=isolation_level))

    return wire(
        uow=MySQLUnitOfWork(conn),
        employees_repo=MySQLEmployeeDirectory(conn),
        ledger_repo=MySQLLedgerRepository(conn),
        vacations_repo=MySQLVacationRepository(conn),
        sick_leaves_repo=MySQLSickLeaveRepository(conn),
        extensions_repo=MySQLExtensionRepository(conn),
        cancellations_repo=MySQLCancellationRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
    )
