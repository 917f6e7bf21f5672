"""Caller identity as handed over by the upstream auth layer.

The gateway authenticates the user and forwards ``X-Employee-Id`` and
``X-Employee-Role``; nothing here verifies credentials.
"""

from __future__ import annotations

from functools import wraps

from flask import g, request

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ErrorCode

EMPLOYEE_ID_HEADER = "X-Employee-Id"
EMPLOYEE_ROLE_HEADER = "X-Employee-Role"


def _load_identity() -> None:
    raw_id = (request.headers.get(EMPLOYEE_ID_HEADER) or "").strip()
    if not raw_id.isdigit() or int(raw_id) <= 0:
        raise AuthenticationError(ErrorCode.UNAUTHENTICATED)

    raw_role = (request.headers.get(EMPLOYEE_ROLE_HEADER) or Role.EMPLOYEE.value).strip().lower()
    try:
        role = Role(raw_role)
    except ValueError:
        raise AuthorizationError(ErrorCode.FORBIDDEN)

    g.employee_id = int(raw_id)
    g.role = role


def current_employee_id() -> int:
    return int(g.employee_id)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        _load_identity()
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        _load_identity()
        if g.role != Role.ADMIN:
            raise AuthorizationError(ErrorCode.FORBIDDEN)
        return view(*args, **kwargs)

    return wrapper


def is_admin() -> bool:
    return getattr(g, "role", None) == Role.ADMIN
