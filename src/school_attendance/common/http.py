"""HTTP plumbing shared by the feature controllers.

Controllers stay thin: they parse JSON/query input, call a service and
serialize the result. Domain errors bubble up and are converted here.
"""
from __future__ import annotations

import csv
import io
from functools import wraps
from typing import Any, Iterable, Optional, Sequence

from flask import Flask, current_app, g, jsonify, request, session
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
from ..users.access import AccessControl
from ..users.model import Identity

# Most specific first; ConflictError is reported as a bad request.
_STATUS_BY_ERROR: Sequence[tuple[type[DomainError], int]] = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 400),
    (ValidationError, 400),
)


def status_for(error: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = status_for(e)
        app.logger.info("%s %s -> %s: %s", request.method, request.path, status, e)
        return jsonify({"error": str(e)}), status

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": "Internal server error"}), 500


def current_identity() -> Optional[Identity]:
    """Identity stored in the signed cookie session at login, if any."""
    user_id = session.get("user_id")
    role = session.get("role")
    if user_id is None or role is None:
        return None
    try:
        return Identity(user_id=int(user_id), role=Role(role))
    except ValueError:
        return None


class Guards:
    """Route decorators backed by the injected AccessControl service.

    The checked identity is published on ``flask.g.identity`` for the view.
    """

    def __init__(self, access: AccessControl):
        self._access = access

    def login_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.identity = self._access.require_authenticated(current_identity())
            return view(*args, **kwargs)

        return wrapper

    def admin_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.identity = self._access.require_admin(current_identity())
            return view(*args, **kwargs)

        return wrapper


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def csv_response(*, rows: Iterable[dict], fieldnames: list[str], filename: str):
    """Write rows to a CSV download (UTF-8 with BOM so spreadsheets pick up the encoding)."""

    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=fieldnames)
    writer.writeheader()
    for row in rows:
        writer.writerow(row)

    csv_bytes = out.getvalue().encode("utf-8-sig")
    return current_app.response_class(
        csv_bytes,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
