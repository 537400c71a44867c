from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import Guards, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.access_control)

    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    @guards.login_required
    def students_list():
        return jsonify([s.to_public() for s in container.student_service.list_all()])

    @app.route("/api/students/<int:student_id>", methods=["GET"], endpoint="students_get")
    @guards.login_required
    def students_get(student_id: int):
        return jsonify(container.student_service.get(student_id).to_public())

    @app.route("/api/students", methods=["POST"], endpoint="students_create")
    @guards.admin_required
    def students_create():
        data = json_body()
        student = container.student_service.create(name=data.get("name"), grade=data.get("grade"))
        return jsonify(student.to_public()), 201

    @app.route("/api/students/<int:student_id>", methods=["PATCH"], endpoint="students_update")
    @guards.admin_required
    def students_update(student_id: int):
        return jsonify(container.student_service.update(student_id, json_body()).to_public())

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="students_delete")
    @guards.admin_required
    def students_delete(student_id: int):
        container.student_service.delete(student_id)
        return jsonify({"success": True})
