from __future__ import annotations

from flask import Flask, request

from ..common.auth import admin_required, current_employee_id, is_admin, login_required
from ..common.http import json_body, ok
from ..common.validators import require_int
from ..container import Container
from ..core.constants import DEFAULT_LIST_LIMIT, DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from ..core.enums import RequestKind
from .cancellation_service import NewCancellation
from .extension_service import NewExtension
from .model import UnifiedRequest
from .sick_leave_service import NewSickLeave
from .unified_service import parse_kind
from .vacation_service import NewVacation
from .views import detail_to_dict, page_to_dict, request_to_dict


def register(app: Flask, container: Container) -> None:
    @app.route("/api/requests/vacations", methods=["POST"], endpoint="create_vacation")
    @login_required
    def create_vacation():
        body = json_body()
        vacation = container.vacation_workflow.create(
            current_employee_id(),
            NewVacation(
                departure_day=body.get("departure_day"),
                return_day=body.get("return_day"),
                number_of_days=body.get("number_of_days"),
                reason=body.get("reason"),
                vacation_type=body.get("type"),
                description=body.get("description"),
                attachment_urls=body.get("attachment_urls"),
            ),
        )
        return ok(request_to_dict(UnifiedRequest(kind=RequestKind.VACATION, request=vacation)), 201)

    @app.route("/api/requests/sick-leaves", methods=["POST"], endpoint="create_sick_leave")
    @login_required
    def create_sick_leave():
        body = json_body()
        sick_leave = container.sick_leave_workflow.create(
            current_employee_id(),
            NewSickLeave(
                departure_day=body.get("departure_day"),
                return_day=body.get("return_day"),
                number_of_days=body.get("number_of_days"),
                reason=body.get("reason"),
                attachment_urls=body.get("attachment_urls"),
            ),
        )
        return ok(request_to_dict(UnifiedRequest(kind=RequestKind.SICK_LEAVE, request=sick_leave)), 201)

    @app.route("/api/requests/vacation-extensions", methods=["POST"], endpoint="create_vacation_extension")
    @login_required
    def create_vacation_extension():
        body = json_body()
        extension = container.extension_workflow.create(
            current_employee_id(),
            NewExtension(
                vacation_id=body.get("vacation_id"),
                extend_to_date=body.get("extend_to_date"),
                description=body.get("description"),
                attachment_urls=body.get("attachment_urls"),
            ),
        )
        return ok(request_to_dict(UnifiedRequest(kind=RequestKind.VACATION_EXTENSION, request=extension)), 201)

    @app.route("/api/requests/vacation-cancellations", methods=["POST"], endpoint="create_vacation_cancellation")
    @login_required
    def create_vacation_cancellation():
        body = json_body()
        cancellation = container.cancellation_workflow.create(
            current_employee_id(),
            NewCancellation(
                vacation_id=body.get("vacation_id"),
                description=body.get("description"),
                attachment_urls=body.get("attachment_urls"),
            ),
        )
        return ok(
            request_to_dict(UnifiedRequest(kind=RequestKind.VACATION_CANCELLATION, request=cancellation)), 201
        )

    @app.route("/api/requests/me", methods=["GET"], endpoint="my_requests")
    @login_required
    def my_requests():
        page = container.request_service.get_my_requests(
            current_employee_id(),
            page=request.args.get("page", DEFAULT_PAGE),
            limit=request.args.get("limit", DEFAULT_PAGE_SIZE),
        )
        return ok(page_to_dict(page))

    @app.route("/api/requests/<kind>/<int:request_id>", methods=["GET"], endpoint="get_request")
    @login_required
    def get_request(kind: str, request_id: int):
        viewer_id = None if is_admin() else current_employee_id()
        detail = container.request_service.get_request(parse_kind(kind), request_id, viewer_id=viewer_id)
        return ok(detail_to_dict(detail))

    @app.route("/api/admin/requests", methods=["GET"], endpoint="admin_requests")
    @admin_required
    def admin_requests():
        kind = request.args.get("kind")
        employee_id = request.args.get("employee_id")
        items = container.request_service.list_requests(
            kind=parse_kind(kind) if kind else None,
            status=request.args.get("status"),
            employee_id=require_int(employee_id, "employee_id", minimum=1) if employee_id else None,
            limit=request.args.get("limit", DEFAULT_LIST_LIMIT),
        )
        return ok([request_to_dict(i) for i in items])

    @app.route("/api/admin/requests/<kind>/<int:request_id>/status", methods=["PATCH"], endpoint="update_request_status")
    @admin_required
    def update_request_status(kind: str, request_id: int):
        body = json_body()
        detail = container.request_service.update_request_status(
            parse_kind(kind), request_id, body.get("status")
        )
        return ok(detail_to_dict(detail))
