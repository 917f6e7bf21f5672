"""JSON-ready dicts for request payloads."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from ..common.pagination import Page
from ..ledger.model import LeaveBalance
from .model import (
    SickLeaveRequest,
    UnifiedRequest,
    VacationCancellationRequest,
    VacationExtensionRequest,
    VacationRequest,
)
from .unified_service import RequestDetail


def _iso(value: Optional[date | datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _num(value: Decimal) -> float:
    return float(value)


def balance_to_dict(balance: Optional[LeaveBalance]) -> Optional[Dict[str, Any]]:
    if balance is None:
        return None
    return {
        "total": _num(balance.total_days),
        "used": _num(balance.used_days),
        "available": _num(balance.available),
    }


def request_to_dict(item: UnifiedRequest) -> Dict[str, Any]:
    r = item.request
    data: Dict[str, Any] = {
        "kind": item.kind.value,
        "id": item.request_id,
        "employee_id": r.employee_id,
        "status": r.status.value,
        "attachment_urls": list(r.attachment_urls),
        "created_at": _iso(r.created_at),
        "updated_at": _iso(r.updated_at),
    }

    if isinstance(r, VacationRequest):
        data.update(
            departure_day=_iso(r.departure_day),
            return_day=_iso(r.return_day),
            number_of_days=r.number_of_days,
            reason=r.reason.value,
            type=r.vacation_type.value,
            description=r.description,
        )
    elif isinstance(r, SickLeaveRequest):
        data.update(
            departure_day=_iso(r.departure_day),
            return_day=_iso(r.return_day),
            number_of_days=r.number_of_days,
            reason=r.reason,
        )
    elif isinstance(r, VacationExtensionRequest):
        data.update(
            vacation_id=r.vacation_id,
            extend_to_date=_iso(r.extend_to_date),
            additional_days=r.additional_days,
            description=r.description,
        )
    elif isinstance(r, VacationCancellationRequest):
        data.update(vacation_id=r.vacation_id, description=r.description)

    return data


def detail_to_dict(detail: RequestDetail) -> Dict[str, Any]:
    data = request_to_dict(detail.item)
    data["balance"] = balance_to_dict(detail.balance)
    return data


def page_to_dict(page: Page[UnifiedRequest]) -> Dict[str, Any]:
    return {
        "items": [request_to_dict(i) for i in page.items],
        "total": page.total,
        "page": page.page,
        "limit": page.limit,
        "total_pages": page.total_pages,
    }
