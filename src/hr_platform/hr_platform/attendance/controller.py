from __future__ import annotations

from flask import Flask, request

from ..common.auth import current_employee_id, login_required
from ..common.http import json_body, ok
from ..container import Container
from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from .service import parse_location
from .views import history_to_dict, period_to_dict, record_to_dict, today_to_dict


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="clock_in")
    @login_required
    def clock_in():
        location = parse_location(json_body().get("location"))
        record = container.attendance_clock.clock_in(current_employee_id(), location=location)
        return ok(record_to_dict(record), 201)

    @app.route("/api/attendance/start-break", methods=["POST"], endpoint="start_break")
    @login_required
    def start_break():
        record = container.attendance_clock.take_break(current_employee_id())
        return ok(record_to_dict(record))

    @app.route("/api/attendance/end-break", methods=["POST"], endpoint="end_break")
    @login_required
    def end_break():
        record = container.attendance_clock.back_to_work(current_employee_id())
        return ok(record_to_dict(record))

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="clock_out")
    @login_required
    def clock_out():
        location = parse_location(json_body().get("location"))
        record = container.attendance_clock.clock_out(current_employee_id(), location=location)
        return ok(record_to_dict(record))

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        return ok(today_to_dict(container.attendance_clock.get_today_status(current_employee_id())))

    @app.route("/api/attendance/period-hours", methods=["GET"], endpoint="attendance_period_hours")
    @login_required
    def period_hours():
        result = container.attendance_clock.get_period_hours(
            current_employee_id(),
            request.args.get("start_date"),
            request.args.get("end_date"),
        )
        return ok(period_to_dict(result))

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def history():
        args = request.args
        page = container.attendance_clock.get_history(
            current_employee_id(),
            start_date=args.get("start_date"),
            end_date=args.get("end_date"),
            month=args.get("month"),
            year=args.get("year"),
            status=args.get("status"),
            page=args.get("page", DEFAULT_PAGE),
            limit=args.get("limit", DEFAULT_PAGE_SIZE),
        )
        return ok(history_to_dict(page))
