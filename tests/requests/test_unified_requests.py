from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from src.hr_platform.hr_platform.core.enums import RequestKind, SickLeaveStatus, VacationStatus
from src.hr_platform.hr_platform.core.exceptions import AuthorizationError, ErrorCode, NotFoundError, ValidationError
from src.hr_platform.hr_platform.requests.cancellation_service import NewCancellation
from src.hr_platform.hr_platform.requests.extension_service import NewExtension
from src.hr_platform.hr_platform.requests.sick_leave_service import NewSickLeave
from src.hr_platform.hr_platform.requests.unified_service import parse_kind
from src.hr_platform.hr_platform.requests.vacation_service import NewVacation

T0 = datetime(2025, 1, 2, 9, 0)


def _seed(container, store):
    """One request of every kind for employee 1, one vacation for employee 2."""

    store.add_employee(1, total="30", used="8")
    store.add_employee(2)
    svc = container.request_service

    v = container.vacation_workflow.create(1, NewVacation("2025-01-10", "2025-01-14", 5, "ANNUAL_LEAVE", "PAID"), now=T0)
    svc.update_request_status(RequestKind.VACATION, v.vacation_id, "approved", now=T0)
    s = container.sick_leave_workflow.create(1, NewSickLeave("2025-02-01", "2025-02-02", 2), now=T0 + timedelta(hours=1))
    e = container.extension_workflow.create(1, NewExtension(v.vacation_id, "2025-01-16"), now=T0 + timedelta(hours=2))
    c = container.cancellation_workflow.create(1, NewCancellation(v.vacation_id), now=T0 + timedelta(hours=3))
    other = container.vacation_workflow.create(
        2, NewVacation("2025-01-10", "2025-01-10", 1, "OTHER", "UNPAID"), now=T0 + timedelta(hours=4)
    )
    return v, s, e, c, other


def test_update_request_status_dispatches_by_kind_and_returns_balance(container, store):
    store.add_employee(1, total="30", used="8")
    v = container.vacation_workflow.create(1, NewVacation("2025-01-10", "2025-01-14", 5, "ANNUAL_LEAVE", "PAID"), now=T0)

    detail = container.request_service.update_request_status(RequestKind.VACATION, v.vacation_id, "APPROVED", now=T0)

    assert detail.item.kind == RequestKind.VACATION
    assert detail.item.request.status == VacationStatus.APPROVED
    assert detail.balance.used_days == Decimal("13")
    assert detail.balance.available == Decimal("17")


@pytest.mark.parametrize("new_status", ["CANCELLED", "PENDING", "", None, "maybe"])
def test_only_approved_or_rejected_can_be_requested(container, store, new_status):
    store.add_employee(1)
    v = container.vacation_workflow.create(1, NewVacation("2025-01-10", "2025-01-14", 5, "ANNUAL_LEAVE", "PAID"), now=T0)

    with pytest.raises(ValidationError) as exc:
        container.request_service.update_request_status(RequestKind.VACATION, v.vacation_id, new_status)
    assert exc.value.code == ErrorCode.INVALID_STATUS_TRANSITION
    assert store.vacations[v.vacation_id].status == VacationStatus.PENDING


def test_sick_leave_detail_has_no_balance(container, store):
    store.add_employee(1)
    s = container.sick_leave_workflow.create(1, NewSickLeave("2025-02-01", "2025-02-02", 2), now=T0)

    detail = container.request_service.update_request_status(RequestKind.SICK_LEAVE, s.sick_leave_id, "rejected", now=T0)

    assert detail.item.request.status == SickLeaveStatus.REJECTED
    assert detail.balance is None


def test_get_my_requests_is_unified_newest_first(container, store):
    v, s, e, c, _ = _seed(container, store)

    page = container.request_service.get_my_requests(1, page=1, limit=20)

    assert [(i.kind, i.request_id) for i in page.items] == [
        (RequestKind.VACATION_CANCELLATION, c.cancellation_id),
        (RequestKind.VACATION_EXTENSION, e.extension_id),
        (RequestKind.SICK_LEAVE, s.sick_leave_id),
        (RequestKind.VACATION, v.vacation_id),
    ]
    assert page.total == 4
    assert page.total_pages == 1


def test_get_my_requests_paginates(container, store):
    _seed(container, store)

    second = container.request_service.get_my_requests(1, page=2, limit=3)

    assert second.total == 4
    assert second.total_pages == 2
    assert [i.kind for i in second.items] == [RequestKind.VACATION]


def test_get_my_requests_counts_every_row_of_a_kind(container, store):
    store.add_employee(1)
    first_day = datetime(2020, 1, 1)
    for n in range(505):
        day = (first_day + timedelta(days=n)).date().isoformat()
        container.sick_leave_workflow.create(1, NewSickLeave(day, day, 1), now=T0 + timedelta(minutes=n))

    last = container.request_service.get_my_requests(1, page=26, limit=20)

    assert last.total == 505
    assert last.total_pages == 26
    assert len(last.items) == 5
    assert last.items[-1].request.departure_day.isoformat() == "2020-01-01"


@pytest.mark.parametrize("page,limit", [(0, 20), (1, 0), (1, 101), ("x", 20)])
def test_get_my_requests_rejects_bad_pagination(container, page, limit):
    with pytest.raises(ValidationError):
        container.request_service.get_my_requests(1, page=page, limit=limit)


def test_list_requests_filters(container, store):
    v, s, e, c, other = _seed(container, store)
    svc = container.request_service

    assert len(svc.list_requests()) == 5
    assert [i.request_id for i in svc.list_requests(kind=RequestKind.VACATION)] == [other.vacation_id, v.vacation_id]
    assert [i.request_id for i in svc.list_requests(employee_id=2)] == [other.vacation_id]

    pending = svc.list_requests(status="pending")
    assert {(i.kind, i.request_id) for i in pending} == {
        (RequestKind.SICK_LEAVE, s.sick_leave_id),
        (RequestKind.VACATION_EXTENSION, e.extension_id),
        (RequestKind.VACATION_CANCELLATION, c.cancellation_id),
        (RequestKind.VACATION, other.vacation_id),
    }

    assert len(svc.list_requests(limit=2)) == 2
    assert svc.list_requests(status="CANCELLED") == []

    with pytest.raises(ValidationError):
        svc.list_requests(status="WHATEVER")


def test_get_request_enforces_ownership_for_viewers(container, store):
    v, *_ = _seed(container, store)
    svc = container.request_service

    detail = svc.get_request(RequestKind.VACATION, v.vacation_id, viewer_id=1)
    assert detail.balance.used_days == Decimal("13")

    with pytest.raises(AuthorizationError):
        svc.get_request(RequestKind.VACATION, v.vacation_id, viewer_id=2)

    # admins look up without a viewer restriction
    assert svc.get_request(RequestKind.VACATION, v.vacation_id).item.employee_id == 1

    with pytest.raises(NotFoundError) as exc:
        svc.get_request(RequestKind.SICK_LEAVE, 999)
    assert exc.value.code == ErrorCode.REQUEST_NOT_FOUND


def test_parse_kind_accepts_slugs_and_enum_values():
    assert parse_kind("sick-leaves") == RequestKind.SICK_LEAVE
    assert parse_kind("VACATION_EXTENSION") == RequestKind.VACATION_EXTENSION
    assert parse_kind("vacation_cancellation") == RequestKind.VACATION_CANCELLATION
    with pytest.raises(ValidationError):
        parse_kind("overtime")
