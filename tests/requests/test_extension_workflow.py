from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.hr_platform.hr_platform.core.enums import Decision, ExtensionStatus, VacationStatus
from src.hr_platform.hr_platform.core.exceptions import (
    AuthorizationError,
    ConflictError,
    ErrorCode,
    NotFoundError,
    ValidationError,
)
from src.hr_platform.hr_platform.requests.cancellation_service import NewCancellation
from src.hr_platform.hr_platform.requests.extension_service import NewExtension
from src.hr_platform.hr_platform.requests.vacation_service import NewVacation

NOW = datetime(2025, 1, 2, 9, 0)


@pytest.fixture()
def approved_vacation(container, store):
    store.add_employee(1, total="30", used="8")
    v = container.vacation_workflow.create(
        1, NewVacation("2025-01-10", "2025-01-14", 5, "ANNUAL_LEAVE", "PAID"), now=NOW
    )
    return container.vacation_workflow.update_status(v.vacation_id, Decision.APPROVED, now=NOW)


def test_create_computes_additional_days(container, approved_vacation):
    ext = container.extension_workflow.create(
        1, NewExtension(approved_vacation.vacation_id, "2025-01-17", description="Flight delayed"), now=NOW
    )
    assert ext.status == ExtensionStatus.PENDING
    assert ext.additional_days == 3
    assert ext.extend_to_date == date(2025, 1, 17)
    assert ext.employee_id == 1


def test_only_owner_may_extend(container, store, approved_vacation):
    store.add_employee(2)
    with pytest.raises(AuthorizationError) as exc:
        container.extension_workflow.create(2, NewExtension(approved_vacation.vacation_id, "2025-01-17"), now=NOW)
    assert exc.value.code == ErrorCode.NOT_OWNER


def test_only_approved_vacations_can_be_extended(container, store):
    store.add_employee(1)
    pending = container.vacation_workflow.create(
        1, NewVacation("2025-01-10", "2025-01-14", 5, "ANNUAL_LEAVE", "PAID"), now=NOW
    )
    with pytest.raises(ConflictError) as exc:
        container.extension_workflow.create(1, NewExtension(pending.vacation_id, "2025-01-17"), now=NOW)
    assert exc.value.code == ErrorCode.CAN_ONLY_EXTEND_APPROVED


@pytest.mark.parametrize("extend_to", ["2025-01-14", "2025-01-12"])
def test_extend_to_date_must_be_after_return_day(container, approved_vacation, extend_to):
    with pytest.raises(ValidationError) as exc:
        container.extension_workflow.create(1, NewExtension(approved_vacation.vacation_id, extend_to), now=NOW)
    assert exc.value.code == ErrorCode.EXTEND_TO_DATE_MUST_BE_AFTER_RETURN


def test_one_pending_extension_per_vacation(container, approved_vacation):
    wf = container.extension_workflow
    first = wf.create(1, NewExtension(approved_vacation.vacation_id, "2025-01-17"), now=NOW)

    with pytest.raises(ConflictError) as exc:
        wf.create(1, NewExtension(approved_vacation.vacation_id, "2025-01-19"), now=NOW)
    assert exc.value.code == ErrorCode.EXTENSION_REQUEST_PENDING

    wf.update_status(first.extension_id, Decision.REJECTED, now=NOW)
    wf.create(1, NewExtension(approved_vacation.vacation_id, "2025-01-19"), now=NOW)


def test_unknown_vacation(container, store):
    store.add_employee(1)
    with pytest.raises(NotFoundError) as exc:
        container.extension_workflow.create(1, NewExtension(999, "2025-01-17"), now=NOW)
    assert exc.value.code == ErrorCode.REQUEST_NOT_FOUND


def test_approval_moves_return_day_and_reserves_once(container, store, approved_vacation):
    ext = container.extension_workflow.create(1, NewExtension(approved_vacation.vacation_id, "2025-01-17"), now=NOW)
    store.lock_log.clear()

    approved = container.extension_workflow.update_status(ext.extension_id, Decision.APPROVED, now=NOW)

    vacation = store.vacations[approved_vacation.vacation_id]
    assert approved.status == ExtensionStatus.APPROVED
    assert vacation.return_day == date(2025, 1, 17)
    assert vacation.number_of_days == 8
    assert vacation.status == VacationStatus.APPROVED
    assert store.employees[1].used_vacation_days == Decimal("16")
    assert store.lock_log == [
        ("extension", ext.extension_id),
        ("vacation", approved_vacation.vacation_id),
        ("employee", 1),
    ]

    with pytest.raises(ConflictError) as exc:
        container.extension_workflow.update_status(ext.extension_id, Decision.APPROVED, now=NOW)
    assert exc.value.code == ErrorCode.ALREADY_PROCESSED
    assert store.employees[1].used_vacation_days == Decimal("16")


def test_rejection_leaves_vacation_alone(container, store, approved_vacation):
    ext = container.extension_workflow.create(1, NewExtension(approved_vacation.vacation_id, "2025-01-17"), now=NOW)
    container.extension_workflow.update_status(ext.extension_id, Decision.REJECTED, now=NOW)

    assert store.vacations[approved_vacation.vacation_id].return_day == date(2025, 1, 14)
    assert store.employees[1].used_vacation_days == Decimal("13")


def test_insufficient_balance_rolls_back_everything(container, store, approved_vacation):
    # 30 total, 13 used: 17 available, ask for 20 more days
    ext = container.extension_workflow.create(1, NewExtension(approved_vacation.vacation_id, "2025-02-03"), now=NOW)
    assert ext.additional_days == 20

    with pytest.raises(ConflictError) as exc:
        container.extension_workflow.update_status(ext.extension_id, Decision.APPROVED, now=NOW)
    assert exc.value.code == ErrorCode.INSUFFICIENT_BALANCE

    assert store.extensions[ext.extension_id].status == ExtensionStatus.PENDING
    assert store.vacations[approved_vacation.vacation_id].return_day == date(2025, 1, 14)
    assert store.employees[1].used_vacation_days == Decimal("13")


def test_extension_of_a_since_cancelled_vacation_cannot_be_approved(container, store, approved_vacation):
    ext = container.extension_workflow.create(1, NewExtension(approved_vacation.vacation_id, "2025-01-17"), now=NOW)
    c = container.cancellation_workflow.create(1, NewCancellation(approved_vacation.vacation_id), now=NOW)
    container.cancellation_workflow.update_status(c.cancellation_id, Decision.APPROVED, now=NOW)

    with pytest.raises(ConflictError) as exc:
        container.extension_workflow.update_status(ext.extension_id, Decision.APPROVED, now=NOW)
    assert exc.value.code == ErrorCode.CAN_ONLY_EXTEND_APPROVED
    assert store.employees[1].used_vacation_days == Decimal("8")
