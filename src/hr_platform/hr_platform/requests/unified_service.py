"""Cross-kind entry points: admin status updates and combined listings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from ..common.pagination import Page, paginate
from ..common.validators import require_int, require_pagination
from ..core.constants import DEFAULT_LIST_LIMIT, DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_LIST_LIMIT
from ..core.enums import (
    CancellationStatus,
    ExtensionStatus,
    RequestKind,
    SickLeaveStatus,
    VacationStatus,
)
from ..core.exceptions import AuthorizationError, ErrorCode, ValidationError
from ..ledger.model import LeaveBalance
from ..ledger.service import LeaveBalanceLedger
from .cancellation_service import VacationCancellationWorkflow
from .extension_service import VacationExtensionWorkflow
from .model import UnifiedRequest
from .sick_leave_service import SickLeaveRequestWorkflow
from .transitions import parse_decision
from .vacation_service import VacationRequestWorkflow

_STATUS_TYPES = {
    RequestKind.VACATION: VacationStatus,
    RequestKind.SICK_LEAVE: SickLeaveStatus,
    RequestKind.VACATION_EXTENSION: ExtensionStatus,
    RequestKind.VACATION_CANCELLATION: CancellationStatus,
}

_ALL_STATUSES = frozenset(s.value for cls in _STATUS_TYPES.values() for s in cls)

LEDGER_KINDS = frozenset(
    {RequestKind.VACATION, RequestKind.VACATION_EXTENSION, RequestKind.VACATION_CANCELLATION}
)


@dataclass(frozen=True)
class RequestDetail:
    item: UnifiedRequest
    balance: Optional[LeaveBalance] = None


class RequestService:
    def __init__(
        self,
        vacations: VacationRequestWorkflow,
        sick_leaves: SickLeaveRequestWorkflow,
        extensions: VacationExtensionWorkflow,
        cancellations: VacationCancellationWorkflow,
        ledger: LeaveBalanceLedger,
    ):
        self._workflows = {
            RequestKind.VACATION: vacations,
            RequestKind.SICK_LEAVE: sick_leaves,
            RequestKind.VACATION_EXTENSION: extensions,
            RequestKind.VACATION_CANCELLATION: cancellations,
        }
        self._ledger = ledger

    def _detail(self, item: UnifiedRequest) -> RequestDetail:
        balance = self._ledger.snapshot(item.employee_id) if item.kind in LEDGER_KINDS else None
        return RequestDetail(item=item, balance=balance)

    def update_request_status(
        self,
        kind: RequestKind,
        request_id: int,
        new_status: object,
        *,
        now: Optional[datetime] = None,
    ) -> RequestDetail:
        decision = parse_decision(new_status)
        updated = self._workflows[kind].update_status(int(request_id), decision, now=now)
        return self._detail(UnifiedRequest(kind=kind, request=updated))

    def get_request(self, kind: RequestKind, request_id: int, *, viewer_id: Optional[int] = None) -> RequestDetail:
        """``viewer_id`` restricts the lookup to the viewer's own requests."""

        item = UnifiedRequest(kind=kind, request=self._workflows[kind].get(int(request_id)))
        if viewer_id is not None and item.employee_id != int(viewer_id):
            raise AuthorizationError(ErrorCode.NOT_OWNER)
        return self._detail(item)

    def list_requests(
        self,
        *,
        kind: Optional[RequestKind] = None,
        status: Optional[str] = None,
        employee_id: Optional[int] = None,
        limit: object = DEFAULT_LIST_LIMIT,
    ) -> List[UnifiedRequest]:
        limit = require_int(limit, "limit", minimum=1, maximum=MAX_LIST_LIMIT)
        kinds = [kind] if kind is not None else list(RequestKind)
        wanted = _parse_status(status)

        items: List[UnifiedRequest] = []
        for k in kinds:
            status_cls = _STATUS_TYPES[k]
            status_filter = None
            if wanted is not None:
                if wanted not in {s.value for s in status_cls}:
                    # e.g. CANCELLED only exists for vacations
                    continue
                status_filter = status_cls(wanted)
            rows = self._workflows[k].list(status=status_filter, employee_id=employee_id, limit=limit)
            items.extend(UnifiedRequest(kind=k, request=r) for r in rows)

        items.sort(key=_created_key, reverse=True)
        return items[:limit]

    def get_my_requests(
        self,
        employee_id: int,
        *,
        page: object = DEFAULT_PAGE,
        limit: object = DEFAULT_PAGE_SIZE,
    ) -> Page[UnifiedRequest]:
        page_no, page_size = require_pagination(page, limit)

        items: List[UnifiedRequest] = []
        for k, workflow in self._workflows.items():
            rows = workflow.list(employee_id=int(employee_id), limit=None)
            items.extend(UnifiedRequest(kind=k, request=r) for r in rows)

        items.sort(key=_created_key, reverse=True)
        return paginate(items, page=page_no, limit=page_size)


def _created_key(item: UnifiedRequest):
    return (item.created_at, item.request_id)


def _parse_status(status: Optional[str]) -> Optional[str]:
    if status is None or not str(status).strip():
        return None
    value = str(status).strip().upper()
    if value not in _ALL_STATUSES:
        raise ValidationError(ErrorCode.INVALID_INPUT, field="status")
    return value


KIND_SLUGS: Dict[str, RequestKind] = {
    "vacations": RequestKind.VACATION,
    "sick-leaves": RequestKind.SICK_LEAVE,
    "vacation-extensions": RequestKind.VACATION_EXTENSION,
    "vacation-cancellations": RequestKind.VACATION_CANCELLATION,
}


def parse_kind(value: object) -> RequestKind:
    """Accept either a URL slug (``sick-leaves``) or an enum value (``SICK_LEAVE``)."""

    text = str(value or "").strip()
    if text.lower() in KIND_SLUGS:
        return KIND_SLUGS[text.lower()]
    try:
        return RequestKind(text.upper())
    except ValueError:
        raise ValidationError(ErrorCode.INVALID_INPUT, field="kind")
