from __future__ import annotations

from typing import Any, Dict

from flask import jsonify, request

from ..core.exceptions import ErrorCode, ValidationError


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(ErrorCode.INVALID_INPUT, field="body")
    return data


def ok(data: Any, status: int = 200):
    return jsonify({"success": True, "data": data}), status
