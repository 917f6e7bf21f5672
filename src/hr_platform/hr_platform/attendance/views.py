from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from ..common.pagination import Page
from .model import AttendanceBreak, AttendanceRecord, Location, PeriodHours, TodayStatus


def _iso(value: Optional[date | datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _hours(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


def location_to_dict(location: Optional[Location]) -> Optional[Dict[str, Any]]:
    if location is None:
        return None
    return {
        "latitude": location.latitude,
        "longitude": location.longitude,
        "accuracy": location.accuracy,
        "address": location.address,
    }


def break_to_dict(b: AttendanceBreak) -> Dict[str, Any]:
    return {
        "id": b.break_id,
        "break_start": _iso(b.break_start),
        "break_end": _iso(b.break_end),
        "duration_minutes": b.duration_minutes,
    }


def record_to_dict(r: AttendanceRecord) -> Dict[str, Any]:
    return {
        "id": r.attendance_id,
        "employee_id": r.employee_id,
        "date": _iso(r.work_date),
        "clock_in_time": _iso(r.clock_in_time),
        "clock_out_time": _iso(r.clock_out_time),
        "status": r.status.value,
        "total_break_minutes": r.total_break_minutes,
        "total_hours": _hours(r.total_hours),
        "clock_in_location": location_to_dict(r.clock_in_location),
        "clock_out_location": location_to_dict(r.clock_out_location),
        "breaks": [break_to_dict(b) for b in r.breaks],
    }


def today_to_dict(status: TodayStatus) -> Dict[str, Any]:
    active = None
    if status.active_break is not None:
        active = break_to_dict(status.active_break)
        active["current_break_minutes"] = status.current_break_minutes

    attendance = None
    if status.attendance is not None:
        attendance = record_to_dict(status.attendance)
        attendance["current_working_hours"] = _hours(status.current_working_hours)

    return {"attendance": attendance, "active_break": active}


def period_to_dict(p: PeriodHours) -> Dict[str, Any]:
    return {
        "start_date": _iso(p.start_date),
        "end_date": _iso(p.end_date),
        "total_hours": float(p.total_hours),
        "days_worked": p.days_worked,
        "average_hours_per_day": float(p.average_hours_per_day),
    }


def history_to_dict(page: Page[AttendanceRecord]) -> Dict[str, Any]:
    return {
        "data": [record_to_dict(r) for r in page.items],
        "meta": {
            "page": page.page,
            "limit": page.limit,
            "total": page.total,
            "total_pages": page.total_pages,
            "has_next_page": page.has_next_page,
            "has_previous_page": page.has_previous_page,
        },
    }
