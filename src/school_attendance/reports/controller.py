from __future__ import annotations

from flask import Flask, jsonify, request

from ..attendance.controller import filters_from_query
from ..common.http import Guards, csv_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.access_control)

    def _range_suffix(filters) -> str:
        start = filters.start_date.strftime("%Y%m%d") if filters.start_date else "all"
        end = filters.end_date.strftime("%Y%m%d") if filters.end_date else "all"
        return f"{start}_{end}"

    @app.route("/api/reports/teacher-work-hours", methods=["GET"], endpoint="report_teacher_hours")
    @guards.login_required
    def teacher_work_hours():
        hours = container.report_service.teacher_work_hours(filters_from_query(request.args))
        return jsonify({str(teacher_id): total for teacher_id, total in hours.items()})

    @app.route("/api/reports/teacher-work-hours.csv", methods=["GET"], endpoint="report_teacher_hours_csv")
    @guards.login_required
    def teacher_work_hours_csv():
        filters = filters_from_query(request.args)
        rows = container.report_service.teacher_work_hours_rows(filters)
        return csv_response(
            rows=(
                {"teacher_id": r.teacher_id, "teacher_name": r.teacher_name, "hours": f"{r.hours:.2f}"}
                for r in rows
            ),
            fieldnames=["teacher_id", "teacher_name", "hours"],
            filename=f"teacher_work_hours_{_range_suffix(filters)}.csv",
        )

    @app.route("/api/reports/student-attendance", methods=["GET"], endpoint="report_student_attendance")
    @guards.login_required
    def student_attendance():
        rows = container.report_service.student_attendance(filters_from_query(request.args))
        return jsonify([r.to_public() for r in rows])

    @app.route("/api/reports/student-attendance.csv", methods=["GET"], endpoint="report_student_attendance_csv")
    @guards.login_required
    def student_attendance_csv():
        filters = filters_from_query(request.args)
        rows = container.report_service.student_attendance(filters)
        return csv_response(
            rows=(
                {
                    "student_id": r.student_id,
                    "student_name": r.student_name,
                    "present": r.present,
                    "total": r.total,
                    "rate": f"{r.rate:.1f}" if r.rate is not None else "",
                }
                for r in rows
            ),
            fieldnames=["student_id", "student_name", "present", "total", "rate"],
            filename=f"student_attendance_{_range_suffix(filters)}.csv",
        )
