from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.datetime_utils import now_utc
from .common.i18n import Localizer
from .container import Container, build_container
from .core.constants import DEFAULT_LANGUAGE, DEFAULT_TX_ISOLATION_LEVEL
from .core.exceptions import DomainError, ErrorCode
from .core.logging import configure_logging
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .requests.controller import register as register_requests

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _error_response(localizer: Localizer, *, status: int, code: ErrorCode, args: Optional[dict] = None):
    lang = localizer.resolve_language(request.args.get("lang"), request.headers.get("Accept-Language"))
    body = {
        "success": False,
        "statusCode": status,
        "code": code.value,
        "message": localizer.translate(code, args, lang),
        "path": request.path,
        "timestamp": now_utc().isoformat() + "Z",
    }
    return jsonify(body), status


def register_error_handlers(app: Flask, localizer: Localizer) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return _error_response(localizer, status=e.http_status, code=e.code, args=e.args_map)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return _error_response(
            localizer,
            status=e.code or 500,
            code=ErrorCode.HTTP_ERROR,
            args={"description": e.description or e.name},
        )

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s (employee=%s)", request.method, request.path, g.get("employee_id"))
        return _error_response(localizer, status=500, code=ErrorCode.INTERNAL_ERROR)


def create_app(container: Optional[Container] = None) -> Flask:
    """App factory. Pass ``container`` to run against pre-built services (tests)."""

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.json.ensure_ascii = False

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    localizer = Localizer(getattr(settings, "DEFAULT_LANGUAGE", DEFAULT_LANGUAGE))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            logger.info("Demo seed ready")

        container = build_container(
            db_config=db_config,
            isolation_level=getattr(settings, "TX_ISOLATION_LEVEL", DEFAULT_TX_ISOLATION_LEVEL),
        )

    app.extensions["hr_platform.container"] = container
    register_error_handlers(app, localizer)
    register_requests(app, container)
    register_attendance(app, container)

    return app
