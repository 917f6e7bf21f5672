from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from src.hr_platform.hr_platform.core.enums import CancellationStatus, Decision, VacationStatus
from src.hr_platform.hr_platform.core.exceptions import AuthorizationError, ConflictError, ErrorCode
from src.hr_platform.hr_platform.requests.cancellation_service import NewCancellation
from src.hr_platform.hr_platform.requests.vacation_service import NewVacation

NOW = datetime(2025, 1, 2, 9, 0)


def _create_vacation(container, employee_id=1):
    return container.vacation_workflow.create(
        employee_id, NewVacation("2025-01-10", "2025-01-14", 5, "ANNUAL_LEAVE", "PAID"), now=NOW
    )


def test_cancelling_approved_vacation_refunds_its_days(container, store):
    store.add_employee(1, total="30", used="8")
    v = _create_vacation(container)
    container.vacation_workflow.update_status(v.vacation_id, Decision.APPROVED, now=NOW)
    assert store.employees[1].used_vacation_days == Decimal("13")

    c = container.cancellation_workflow.create(1, NewCancellation(v.vacation_id, description="Plans changed"), now=NOW)
    store.lock_log.clear()
    approved = container.cancellation_workflow.update_status(c.cancellation_id, Decision.APPROVED, now=NOW)

    assert approved.status == CancellationStatus.APPROVED
    assert store.vacations[v.vacation_id].status == VacationStatus.CANCELLED
    assert store.employees[1].used_vacation_days == Decimal("8")
    assert store.lock_log == [("cancellation", c.cancellation_id), ("vacation", v.vacation_id), ("employee", 1)]


def test_cancelling_pending_vacation_refunds_nothing(container, store):
    store.add_employee(1, total="30", used="8")
    v = _create_vacation(container)

    c = container.cancellation_workflow.create(1, NewCancellation(v.vacation_id), now=NOW)
    container.cancellation_workflow.update_status(c.cancellation_id, Decision.APPROVED, now=NOW)

    assert store.vacations[v.vacation_id].status == VacationStatus.CANCELLED
    assert store.employees[1].used_vacation_days == Decimal("8")


def test_cancelled_vacation_no_longer_blocks_its_dates(container, store):
    store.add_employee(1)
    v = _create_vacation(container)
    c = container.cancellation_workflow.create(1, NewCancellation(v.vacation_id), now=NOW)
    container.cancellation_workflow.update_status(c.cancellation_id, Decision.APPROVED, now=NOW)

    again = _create_vacation(container)
    assert again.status == VacationStatus.PENDING


def test_rejected_cancellation_keeps_vacation(container, store):
    store.add_employee(1, total="30", used="8")
    v = _create_vacation(container)
    container.vacation_workflow.update_status(v.vacation_id, Decision.APPROVED, now=NOW)
    c = container.cancellation_workflow.create(1, NewCancellation(v.vacation_id), now=NOW)

    container.cancellation_workflow.update_status(c.cancellation_id, Decision.REJECTED, now=NOW)

    assert store.vacations[v.vacation_id].status == VacationStatus.APPROVED
    assert store.employees[1].used_vacation_days == Decimal("13")


def test_cannot_cancel_rejected_vacation(container, store):
    store.add_employee(1)
    v = _create_vacation(container)
    container.vacation_workflow.update_status(v.vacation_id, Decision.REJECTED, now=NOW)

    with pytest.raises(ConflictError) as exc:
        container.cancellation_workflow.create(1, NewCancellation(v.vacation_id), now=NOW)
    assert exc.value.code == ErrorCode.CANNOT_CANCEL


def test_cannot_cancel_twice(container, store):
    store.add_employee(1)
    v = _create_vacation(container)
    c = container.cancellation_workflow.create(1, NewCancellation(v.vacation_id), now=NOW)
    container.cancellation_workflow.update_status(c.cancellation_id, Decision.APPROVED, now=NOW)

    with pytest.raises(ConflictError) as exc:
        container.cancellation_workflow.create(1, NewCancellation(v.vacation_id), now=NOW)
    assert exc.value.code == ErrorCode.CANNOT_CANCEL


def test_one_pending_cancellation_per_vacation(container, store):
    store.add_employee(1)
    v = _create_vacation(container)
    container.cancellation_workflow.create(1, NewCancellation(v.vacation_id), now=NOW)

    with pytest.raises(ConflictError) as exc:
        container.cancellation_workflow.create(1, NewCancellation(v.vacation_id), now=NOW)
    assert exc.value.code == ErrorCode.CANCELLATION_REQUEST_PENDING


def test_only_owner_may_cancel(container, store):
    store.add_employee(1)
    store.add_employee(2)
    v = _create_vacation(container)

    with pytest.raises(AuthorizationError) as exc:
        container.cancellation_workflow.create(2, NewCancellation(v.vacation_id), now=NOW)
    assert exc.value.code == ErrorCode.NOT_OWNER


def test_second_decision_is_already_processed(container, store):
    store.add_employee(1, total="30", used="8")
    v = _create_vacation(container)
    container.vacation_workflow.update_status(v.vacation_id, Decision.APPROVED, now=NOW)
    c = container.cancellation_workflow.create(1, NewCancellation(v.vacation_id), now=NOW)
    container.cancellation_workflow.update_status(c.cancellation_id, Decision.APPROVED, now=NOW)

    with pytest.raises(ConflictError) as exc:
        container.cancellation_workflow.update_status(c.cancellation_id, Decision.APPROVED, now=NOW)
    assert exc.value.code == ErrorCode.ALREADY_PROCESSED
    # refunded exactly once
    assert store.employees[1].used_vacation_days == Decimal("8")
