from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import optional_date, parse_hhmm, parse_iso_date, parse_iso_datetime
from ..common.http import Guards, json_body
from ..common.validators import optional_id, require_id, unique_ids
from ..container import Container
from ..core.exceptions import ValidationError
from .model import AttendanceFilters


def filters_from_query(args: Mapping[str, Any]) -> AttendanceFilters:
    """Build filters from ?startDate&endDate&teacherId&sessionId&studentId."""
    filters = AttendanceFilters(
        start_date=optional_date(args.get("startDate"), "startDate"),
        end_date=optional_date(args.get("endDate"), "endDate"),
        teacher_id=optional_id(args.get("teacherId"), "teacherId"),
        session_id=optional_id(args.get("sessionId"), "sessionId"),
        student_id=optional_id(args.get("studentId"), "studentId"),
    )
    if filters.start_date and filters.end_date and filters.start_date > filters.end_date:
        raise ValidationError("startDate must be on or before endDate")
    return filters


def _parse_actual(value: Any, work_date: date, field: str) -> Optional[datetime]:
    """Accept a full ISO timestamp or a bare HH:MM on the attendance date."""
    if value in (None, ""):
        return None
    try:
        text = str(value)
        if "T" in text or " " in text.strip():
            return parse_iso_datetime(text)
        return datetime.combine(work_date, parse_hhmm(text))
    except ValueError:
        raise ValidationError(f"{field} is not a valid time")


def _parse_work_date(value: Any) -> date:
    if not value:
        raise ValidationError("date is required")
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError("date must be a YYYY-MM-DD date")


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.access_control)

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @guards.login_required
    def attendance_list():
        records = container.attendance_service.list_records(current=g.identity, filters=filters_from_query(request.args))
        return jsonify([r.to_public() for r in records])

    @app.route("/api/attendance/<int:attendance_id>", methods=["GET"], endpoint="attendance_get")
    @guards.login_required
    def attendance_get(attendance_id: int):
        return jsonify(container.attendance_service.get(attendance_id).to_public())

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_create")
    @guards.login_required
    def attendance_create():
        data = json_body()
        work_date = _parse_work_date(data.get("date"))
        record = container.attendance_service.mark(
            current=g.identity,
            work_date=work_date,
            session_id=require_id(data.get("sessionId"), "sessionId"),
            present_student_ids=unique_ids(data.get("presentStudentIds"), "presentStudentIds"),
            actual_start_time=_parse_actual(data.get("actualStartTime"), work_date, "actualStartTime"),
            actual_end_time=_parse_actual(data.get("actualEndTime"), work_date, "actualEndTime"),
        )
        return jsonify(record.to_public()), 201

    @app.route("/api/attendance/<int:attendance_id>", methods=["PATCH"], endpoint="attendance_update")
    @guards.login_required
    def attendance_update(attendance_id: int):
        data = json_body()
        existing = container.attendance_service.get(attendance_id)

        kwargs: dict[str, Any] = {}
        if "presentStudentIds" in data:
            kwargs["present_student_ids"] = unique_ids(data.get("presentStudentIds"), "presentStudentIds")
        if "actualStartTime" in data:
            kwargs["actual_start_time"] = _parse_actual(data["actualStartTime"], existing.work_date, "actualStartTime")
        if "actualEndTime" in data:
            kwargs["actual_end_time"] = _parse_actual(data["actualEndTime"], existing.work_date, "actualEndTime")

        record = container.attendance_service.update(current=g.identity, attendance_id=attendance_id, **kwargs)
        return jsonify(record.to_public())

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="attendance_delete")
    @guards.admin_required
    def attendance_delete(attendance_id: int):
        container.attendance_service.delete(attendance_id)
        return jsonify({"success": True})
