from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from ..users.model import Viewer

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def fail(message: str, status: int, **extra):
    return jsonify({"success": False, "message": message, **extra}), status


def json_body() -> dict:
    """Request JSON object; a missing, malformed or non-object body reads as empty."""

    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def current_viewer() -> Viewer:
    return Viewer(user_id=str(session["user_id"]), role=Role(session["role"]))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def role_required(minimum: Role):
    """Allow ``minimum`` and every role ranked above it."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return fail("Please log in to continue", 401)
            try:
                role = Role(session.get("role"))
            except ValueError:
                return fail("Insufficient permissions", 403)
            if not role.at_least(minimum):
                return fail("Insufficient permissions", 403, required=minimum.value)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        for kind, status in _STATUS_BY_ERROR:
            if isinstance(e, kind):
                return fail(str(e), status)
        logger.error("unmapped domain error: %s", e)
        return fail(str(e), 500)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("unhandled error")
        if app.config.get("DEBUG"):
            return fail(f"Internal server error: {e}", 500)
        return fail("Internal server error", 500)
