from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from src.hr_platform.hr_platform.core.enums import Decision, SickLeaveStatus
from src.hr_platform.hr_platform.core.exceptions import ConflictError, ErrorCode, ValidationError
from src.hr_platform.hr_platform.requests.sick_leave_service import NewSickLeave
from src.hr_platform.hr_platform.requests.vacation_service import NewVacation

NOW = datetime(2025, 1, 2, 9, 0)


def test_create_and_approve_never_touches_ledger(container, store):
    store.add_employee(1, total="30", used="8")
    wf = container.sick_leave_workflow

    s = wf.create(1, NewSickLeave("2025-01-10", "2025-01-12", 3, reason="Flu"), now=NOW)
    assert s.status == SickLeaveStatus.PENDING
    assert s.reason == "Flu"

    approved = wf.update_status(s.sick_leave_id, Decision.APPROVED, now=NOW)
    assert approved.status == SickLeaveStatus.APPROVED
    assert store.employees[1].used_vacation_days == Decimal("8")

    with pytest.raises(ConflictError) as exc:
        wf.update_status(s.sick_leave_id, Decision.REJECTED, now=NOW)
    assert exc.value.code == ErrorCode.ALREADY_PROCESSED


def test_sick_leaves_overlap_only_with_sick_leaves(container, store):
    store.add_employee(1)
    container.vacation_workflow.create(1, NewVacation("2025-01-10", "2025-01-14", 5, "ANNUAL_LEAVE", "PAID"), now=NOW)

    # a vacation on the same days does not conflict
    container.sick_leave_workflow.create(1, NewSickLeave("2025-01-12", "2025-01-13", 2), now=NOW)

    with pytest.raises(ConflictError) as exc:
        container.sick_leave_workflow.create(1, NewSickLeave("2025-01-13", "2025-01-15", 3), now=NOW)
    assert exc.value.code == ErrorCode.OVERLAP_CONFLICT


def test_day_count_must_match(container, store):
    store.add_employee(1)
    with pytest.raises(ValidationError) as exc:
        container.sick_leave_workflow.create(1, NewSickLeave("2025-01-10", "2025-01-12", 2), now=NOW)
    assert exc.value.code == ErrorCode.DAY_COUNT_MISMATCH
