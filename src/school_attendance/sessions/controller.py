from __future__ import annotations

from typing import Any

from flask import Flask, g, jsonify

from ..common.datetime_utils import parse_hhmm, parse_iso_date
from ..common.http import Guards, json_body
from ..common.validators import optional_id, require_id, unique_ids
from ..container import Container
from ..core.exceptions import ValidationError

# JSON key -> (model field, parser)
_FIELDS = {
    "name": ("name", lambda v: v),
    "teacherId": ("teacher_id", lambda v: require_id(v, "Teacher")),
    "departmentId": ("dept_id", lambda v: optional_id(v, "Department")),
    "startDate": ("start_date", parse_iso_date),
    "endDate": ("end_date", parse_iso_date),
    "startTime": ("start_time", parse_hhmm),
    "endTime": ("end_time", parse_hhmm),
    "studentIds": ("student_ids", lambda v: unique_ids(v, "Student")),
}
_REQUIRED = ("name", "teacherId", "startDate", "endDate", "startTime", "endTime")


def parse_session_payload(data: dict, *, partial: bool) -> dict[str, Any]:
    if not partial:
        missing = [k for k in _REQUIRED if data.get(k) in (None, "")]
        if missing:
            raise ValidationError(f"Missing fields: {', '.join(missing)}")

    out: dict[str, Any] = {}
    for key, (field, parse) in _FIELDS.items():
        if key not in data:
            continue
        try:
            out[field] = parse(data[key])
        except (TypeError, ValueError):
            raise ValidationError(f"{key} is not valid")
    return out


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.access_control)

    @app.route("/api/sessions", methods=["GET"], endpoint="sessions_list")
    @guards.login_required
    def sessions_list():
        sessions = container.session_service.list_for(g.identity)
        return jsonify([s.to_public() for s in sessions])

    @app.route("/api/sessions/<int:session_id>", methods=["GET"], endpoint="sessions_get")
    @guards.login_required
    def sessions_get(session_id: int):
        return jsonify(container.session_service.get(session_id).to_public())

    @app.route("/api/sessions", methods=["POST"], endpoint="sessions_create")
    @guards.admin_required
    def sessions_create():
        fields = parse_session_payload(json_body(), partial=False)
        session = container.session_service.create(**fields)
        return jsonify(session.to_public()), 201

    @app.route("/api/sessions/<int:session_id>", methods=["PATCH"], endpoint="sessions_update")
    @guards.admin_required
    def sessions_update(session_id: int):
        changes = parse_session_payload(json_body(), partial=True)
        return jsonify(container.session_service.update(session_id, changes).to_public())

    @app.route("/api/sessions/<int:session_id>", methods=["DELETE"], endpoint="sessions_delete")
    @guards.admin_required
    def sessions_delete(session_id: int):
        container.session_service.delete(session_id)
        return jsonify({"success": True})
